"""DTOs for the Transcript feature."""
from typing import Literal, Optional

from pydantic import Field

from api.shared.dtos import BaseDTO


class AppendMessageRequest(BaseDTO):
    """Record one conversation turn."""

    role: Literal["user", "model"] = Field(description="Message role: user or model")
    content: str = Field(description="Message content")
    reply_to: Optional[int] = Field(
        default=None,
        description="Id of the user turn a model reply answers. "
        "Defaults to the immediately preceding turn when that is a user turn.",
    )


class AppendMessageResponse(BaseDTO):
    """Identifier assigned to a recorded turn."""

    id: int = Field(description="Message identifier")


class AppendFeedbackRequest(BaseDTO):
    """Rate a generated reply."""

    message_id: int = Field(description="Rated message identifier")
    rating: Literal[1, -1] = Field(description="1 for thumbs up, -1 for thumbs down")


class AppendFeedbackResponse(BaseDTO):
    """Acknowledgement of a recorded rating."""

    success: bool = Field(default=True)


class StatsResponse(BaseDTO):
    """Aggregate counts over the whole store."""

    total_responses: int = Field(description="Number of model turns")
    positive: int = Field(description="Number of thumbs-up ratings")
    negative: int = Field(description="Number of thumbs-down ratings")
