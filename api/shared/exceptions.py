"""Shared exceptions for the RL-Chat API."""
from typing import Any, Dict, Optional


class RLChatException(Exception):
    """Base exception for RL-Chat API."""

    status_code: int = 500

    def __init__(
        self,
        message: str,
        error_code: str = "INTERNAL_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)


class ValidationError(RLChatException):
    """Raised when input validation fails."""

    status_code = 422

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "VALIDATION_ERROR", details)


class NotFoundError(RLChatException):
    """Raised when a resource is not found."""

    status_code = 404

    def __init__(self, resource: str, identifier: str):
        message = f"{resource} with identifier '{identifier}' not found"
        super().__init__(message, "NOT_FOUND", {"resource": resource, "identifier": identifier})


class ConflictError(RLChatException):
    """Raised when there's a conflict with existing data."""

    status_code = 409

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "CONFLICT", details)


class DatabaseError(RLChatException):
    """Raised when database operations fail."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "DATABASE_ERROR", details)


class ExternalServiceError(RLChatException):
    """Raised when external service calls fail."""

    status_code = 502

    def __init__(self, service: str, message: str, details: Optional[Dict[str, Any]] = None):
        full_message = f"{service} service error: {message}"
        super().__init__(full_message, "EXTERNAL_SERVICE_ERROR", details)
