"""Exceptions for the Generation feature."""
from typing import Any, Dict, Optional

from api.shared.exceptions import ExternalServiceError


class GenerationError(ExternalServiceError):
    """Raised when the text-generation backend call fails."""

    def __init__(
        self, message: str, model: str, details: Optional[Dict[str, Any]] = None
    ):
        error_details: Dict[str, Any] = {"model": model}
        if details:
            error_details.update(details)
        super().__init__("Generation", f"model '{model}': {message}", error_details)
