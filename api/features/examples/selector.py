"""Example selection: pick the best-rated past exchanges for few-shot prompting.

A model reply qualifies when it has a thumbs-up rating and is linked to the
user turn that preceded it. Replies without such a turn are skipped outright;
there is no search for an earlier user message.
"""
from __future__ import annotations

import logging
from typing import List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from api.features.examples.dtos import ExampleDTO
from api.features.transcript.entities.feedback import Feedback, Rating
from api.features.transcript.entities.message import Message, MessageRole

logger = logging.getLogger("rlchat.examples.selector")

DEFAULT_LIMIT = 5


class ExampleSelector:
    def __init__(self, limit: int = DEFAULT_LIMIT):
        self.limit = limit

    async def select(self, *, db_session: AsyncSession) -> List[ExampleDTO]:
        """Return up to ``limit`` (prompt, response) pairs, newest rating first."""
        if self.limit <= 0:
            return []

        reply = aliased(Message, name="m_model")
        prompt = aliased(Message, name="m_user")
        stmt = (
            select(prompt.content.label("prompt"), reply.content.label("response"))
            .select_from(reply)
            .join(Feedback, Feedback.message_id == reply.id)
            .join(prompt, prompt.id == reply.reply_to_id)
            .where(
                Feedback.rating == int(Rating.POSITIVE),
                reply.role == MessageRole.MODEL.value,
                prompt.role == MessageRole.USER.value,
            )
            # id breaks ties between ratings stored within the same clock tick
            .order_by(Feedback.created_at.desc(), Feedback.id.desc())
            .limit(self.limit)
        )
        res = await db_session.execute(stmt)
        examples = [ExampleDTO(prompt=r.prompt, response=r.response) for r in res]
        logger.debug(f"Selected {len(examples)} example(s)")
        return examples
