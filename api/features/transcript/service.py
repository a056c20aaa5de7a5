"""Service layer for the Transcript feature: turns, ratings and counts."""
import logging
from typing import Optional

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from api.features.transcript.dtos import StatsResponse
from api.features.transcript.entities.feedback import Rating
from api.features.transcript.entities.message import MessageRole
from api.features.transcript.exceptions import (
    DuplicateFeedbackError,
    InvalidReplyTargetError,
    MessageNotFoundError,
)
from api.features.transcript.repositories.feedback_repository import (
    FeedbackRepository,
)
from api.features.transcript.repositories.message_repository import (
    MessageRepository,
)
from api.shared.exceptions import DatabaseError, ValidationError

logger = logging.getLogger("rlchat.transcript.service")


class TranscriptService:
    """Service over the message and feedback stores using repository pattern."""

    async def append_message(
        self,
        *,
        role: MessageRole,
        content: str,
        reply_to: Optional[int] = None,
        db_session: AsyncSession,
    ) -> int:
        """Record a turn and return its newly assigned id.

        A model turn is linked to the immediately preceding turn when that is a
        user turn. An explicit ``reply_to`` must name exactly that turn.
        """
        repository = MessageRepository(db_session)

        reply_to_id: Optional[int] = None
        if role is MessageRole.MODEL:
            previous = await repository.get_latest()
            answers_previous = (
                previous is not None and previous.role == MessageRole.USER.value
            )
            if reply_to is not None:
                if not answers_previous or previous.id != reply_to:
                    raise InvalidReplyTargetError(reply_to)
                reply_to_id = reply_to
            elif answers_previous:
                reply_to_id = previous.id
        elif reply_to is not None:
            raise ValidationError(
                "Only model turns can reply to another turn",
                {"role": role.value, "reply_to": reply_to},
            )

        try:
            entity = await repository.append(
                role=role, content=content, reply_to_id=reply_to_id
            )
            await db_session.commit()
        except SQLAlchemyError as e:
            await db_session.rollback()
            raise DatabaseError(f"Failed to record message: {e}") from e

        logger.info(f"Message recorded: id={entity.id} role={role.value}")
        return entity.id

    async def append_feedback(
        self, *, message_id: int, rating: Rating, db_session: AsyncSession
    ) -> None:
        """Record a rating for an existing message. One rating per message."""
        messages = MessageRepository(db_session)
        feedback = FeedbackRepository(db_session)

        if not await messages.exists(message_id):
            raise MessageNotFoundError(message_id)
        if await feedback.get_by_message(message_id) is not None:
            raise DuplicateFeedbackError(message_id)

        try:
            await feedback.append(message_id=message_id, rating=rating)
            await db_session.commit()
        except IntegrityError as e:
            await db_session.rollback()
            raise DuplicateFeedbackError(message_id) from e
        except SQLAlchemyError as e:
            await db_session.rollback()
            raise DatabaseError(f"Failed to record feedback: {e}") from e

        logger.info(f"Feedback recorded: message_id={message_id} rating={int(rating)}")

    async def fetch_stats(self, *, db_session: AsyncSession) -> StatsResponse:
        """Count model turns and ratings of each sign."""
        messages = MessageRepository(db_session)
        feedback = FeedbackRepository(db_session)
        return StatsResponse(
            total_responses=await messages.count_model_replies(),
            positive=await feedback.count_by_rating(Rating.POSITIVE),
            negative=await feedback.count_by_rating(Rating.NEGATIVE),
        )
