"""Controller for the Generation feature."""
import logging

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.examples.selector import ExampleSelector
from api.features.generation.dtos import GenerateRequest, GenerateResponse
from api.features.generation.exceptions import GenerationError
from api.features.generation.service import ResponseGenerator

logger = logging.getLogger("rlchat.generation")


class GenerationController:
    """Controller for producing model replies."""

    def __init__(
        self, response_generator: ResponseGenerator, example_selector: ExampleSelector
    ):
        self.response_generator = response_generator
        self.example_selector = example_selector

    async def generate(
        self, request: GenerateRequest, *, db_session: AsyncSession
    ) -> GenerateResponse:
        examples = request.examples
        if examples is None:
            examples = await self.example_selector.select(db_session=db_session)
        try:
            content = await self.response_generator.generate(
                history=request.messages, examples=examples
            )
        except GenerationError as e:
            logger.error(f"Reply generation failed: {e.message}")
            raise HTTPException(status_code=502, detail=e.message)
        return GenerateResponse(content=content)
