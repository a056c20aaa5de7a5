"""Controller for the Transcript feature."""
import logging
from typing import List

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.examples.dtos import ExampleDTO
from api.features.examples.selector import ExampleSelector
from api.features.transcript.dtos import (
    AppendFeedbackRequest,
    AppendFeedbackResponse,
    AppendMessageRequest,
    AppendMessageResponse,
    StatsResponse,
)
from api.features.transcript.entities.feedback import Rating
from api.features.transcript.entities.message import MessageRole
from api.shared.exceptions import ConflictError, NotFoundError, ValidationError
from api.features.transcript.service import TranscriptService

logger = logging.getLogger("rlchat.transcript")


class TranscriptController:
    """Controller exposing the message store, feedback store and example selector."""

    def __init__(
        self, transcript_service: TranscriptService, example_selector: ExampleSelector
    ):
        self.transcript_service = transcript_service
        self.example_selector = example_selector

    async def get_stats(self, *, db_session: AsyncSession) -> StatsResponse:
        return await self.transcript_service.fetch_stats(db_session=db_session)

    async def append_message(
        self, request: AppendMessageRequest, *, db_session: AsyncSession
    ) -> AppendMessageResponse:
        try:
            message_id = await self.transcript_service.append_message(
                role=MessageRole(request.role),
                content=request.content,
                reply_to=request.reply_to,
                db_session=db_session,
            )
        except NotFoundError as e:
            logger.warning(f"Rejected reply target: {e.message}")
            raise HTTPException(status_code=404, detail=e.message)
        except ValidationError as e:
            raise HTTPException(status_code=422, detail=e.message)
        return AppendMessageResponse(id=message_id)

    async def append_feedback(
        self, request: AppendFeedbackRequest, *, db_session: AsyncSession
    ) -> AppendFeedbackResponse:
        try:
            await self.transcript_service.append_feedback(
                message_id=request.message_id,
                rating=Rating(request.rating),
                db_session=db_session,
            )
        except NotFoundError as e:
            logger.warning(f"Feedback for unknown message: {e.message}")
            raise HTTPException(status_code=404, detail=e.message)
        except ConflictError as e:
            logger.info(f"Duplicate feedback rejected: {e.message}")
            raise HTTPException(status_code=409, detail=e.message)
        return AppendFeedbackResponse(success=True)

    async def get_examples(self, *, db_session: AsyncSession) -> List[ExampleDTO]:
        return await self.example_selector.select(db_session=db_session)
