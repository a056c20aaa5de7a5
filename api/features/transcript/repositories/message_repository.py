"""Message repository: the append-only turn log."""
from typing import Optional

from sqlalchemy import select

from api.features.transcript.entities.message import Message, MessageRole
from api.shared.base import BaseRepository


class MessageRepository(BaseRepository[Message]):
    """Repository for message entities."""

    model = Message

    async def get_latest(self) -> Optional[Message]:
        """Return the most recently appended message, if any."""
        stmt = select(Message).order_by(Message.id.desc()).limit(1)
        result = await self.session.execute(stmt)
        return result.scalar_one_or_none()

    async def append(
        self, *, role: MessageRole, content: str, reply_to_id: Optional[int] = None
    ) -> Message:
        return await self.create(
            Message(role=role.value, content=content, reply_to_id=reply_to_id)
        )

    async def count_model_replies(self) -> int:
        return await self.count(role=MessageRole.MODEL.value)
