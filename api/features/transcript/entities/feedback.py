"""Feedback entity: a rating event on one message."""
from enum import IntEnum

from sqlalchemy import ForeignKey, Integer, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column

from api.shared.entities.base import BaseEntity


class Rating(IntEnum):
    """Thumbs up / thumbs down."""

    POSITIVE = 1
    NEGATIVE = -1


class Feedback(BaseEntity):
    """Immutable rating. At most one per message."""

    __table_args__ = (
        UniqueConstraint("message_id", name="uq_feedback_message_id"),
        {"sqlite_autoincrement": True},
    )

    message_id: Mapped[int] = mapped_column(
        Integer, ForeignKey("messages.id"), nullable=False, index=True
    )
    rating: Mapped[int] = mapped_column(Integer, nullable=False)
