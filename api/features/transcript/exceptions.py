"""Exceptions for the Transcript feature."""
from api.shared.exceptions import ConflictError, NotFoundError


class MessageNotFoundError(NotFoundError):
    """Raised when feedback targets a message that was never recorded."""

    def __init__(self, message_id: int):
        super().__init__("Message", str(message_id))


class InvalidReplyTargetError(NotFoundError):
    """Raised when a reply names anything but the user turn right before it."""

    def __init__(self, message_id: int):
        super().__init__("Preceding user message", str(message_id))


class DuplicateFeedbackError(ConflictError):
    """Raised when a message already carries a rating."""

    def __init__(self, message_id: int):
        super().__init__(
            f"Message '{message_id}' already has feedback",
            {"message_id": message_id},
        )
