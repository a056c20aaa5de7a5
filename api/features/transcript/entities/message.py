"""Message entity: one conversation turn."""
from enum import Enum
from typing import Optional

from sqlalchemy import ForeignKey, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity


class MessageRole(str, Enum):
    """Who produced a turn."""

    USER = "user"
    MODEL = "model"


class Message(BaseEntity):
    """Immutable chat turn."""

    __tablename__ = "messages"

    role: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    # The user turn a model reply answers; null for user turns and orphan replies.
    reply_to_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("messages.id"), nullable=True
    )
