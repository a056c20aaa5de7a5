"""Feedback repository: rating events keyed by message."""
from typing import Optional

from api.features.transcript.entities.feedback import Feedback, Rating
from api.shared.base import BaseRepository


class FeedbackRepository(BaseRepository[Feedback]):
    """Repository for feedback entities."""

    model = Feedback

    async def get_by_message(self, message_id: int) -> Optional[Feedback]:
        entities = await self.get_by_field("message_id", message_id, limit=1)
        return entities[0] if entities else None

    async def append(self, *, message_id: int, rating: Rating) -> Feedback:
        return await self.create(Feedback(message_id=message_id, rating=int(rating)))

    async def count_by_rating(self, rating: Rating) -> int:
        return await self.count(rating=int(rating))
