"""DTOs for the Generation feature."""
from typing import List, Literal, Optional

from pydantic import Field

from api.features.examples.dtos import ExampleDTO
from api.shared.dtos import BaseDTO


class TurnDTO(BaseDTO):
    """A role-tagged turn of the running conversation."""

    role: Literal["user", "model"] = Field(description="Turn role: user or model")
    content: str = Field(description="Turn text")


class GenerateRequest(BaseDTO):
    """Produce the next model turn for a conversation."""

    messages: List[TurnDTO] = Field(
        min_length=1, description="Conversation so far, oldest first"
    )
    examples: Optional[List[ExampleDTO]] = Field(
        default=None,
        description="Few-shot examples. Selected from stored feedback when omitted.",
    )


class GenerateResponse(BaseDTO):
    """Generated reply text."""

    content: str = Field(description="Model reply")
