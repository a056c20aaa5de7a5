"""Shared DTOs for the RL-Chat API."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class BaseDTO(BaseModel):
    """Base DTO: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )


class HealthCheckResponse(BaseDTO):
    """Health check response DTO."""
    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: str = Field(default="0.1.0")


class ErrorResponse(BaseDTO):
    """Error response DTO."""
    error: str = Field(description="Short error title")
    detail: str = Field(description="Error message")
    status_code: int = Field(description="HTTP status code")
    error_code: Optional[str] = Field(default=None, description="Application error code")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error details")
