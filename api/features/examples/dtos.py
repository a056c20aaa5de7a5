"""DTOs for the Examples feature."""
from pydantic import Field

from api.shared.dtos import BaseDTO


class ExampleDTO(BaseDTO):
    """A highly rated exchange reused as an in-context example."""

    prompt: str = Field(description="User turn that triggered the reply")
    response: str = Field(description="Model reply that was rated thumbs up")
