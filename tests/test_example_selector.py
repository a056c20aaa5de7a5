from datetime import datetime, timedelta

import pytest

from api.features.examples.selector import ExampleSelector
from api.features.transcript.entities.feedback import Feedback, Rating
from api.features.transcript.entities.message import MessageRole
from api.features.transcript.repositories.message_repository import MessageRepository
from api.features.transcript.service import TranscriptService


@pytest.fixture
def service() -> TranscriptService:
    return TranscriptService()


@pytest.fixture
def selector() -> ExampleSelector:
    return ExampleSelector()


async def exchange(service, db_session, prompt: str, response: str) -> int:
    """Store a user turn followed by its reply; return the reply id."""
    await service.append_message(role=MessageRole.USER, content=prompt, db_session=db_session)
    return await service.append_message(
        role=MessageRole.MODEL, content=response, db_session=db_session
    )


def as_pairs(examples):
    return [(e.prompt, e.response) for e in examples]


async def test_empty_store_has_no_examples(selector, db_session):
    assert await selector.select(db_session=db_session) == []


async def test_single_rated_exchange(service, selector, db_session):
    await service.append_message(role=MessageRole.USER, content="Hi", db_session=db_session)
    await service.append_message(role=MessageRole.MODEL, content="Hello!", db_session=db_session)
    await service.append_feedback(message_id=2, rating=Rating.POSITIVE, db_session=db_session)

    examples = await selector.select(db_session=db_session)

    assert [e.model_dump() for e in examples] == [{"prompt": "Hi", "response": "Hello!"}]


async def test_orphan_reply_is_excluded(service, selector, db_session):
    model_id = await service.append_message(
        role=MessageRole.MODEL, content="orphan reply", db_session=db_session
    )
    assert model_id == 1
    await service.append_feedback(
        message_id=model_id, rating=Rating.POSITIVE, db_session=db_session
    )

    assert await selector.select(db_session=db_session) == []


async def test_reply_following_a_model_turn_is_excluded(service, selector, db_session):
    await exchange(service, db_session, "Hi", "Hello!")
    follow_up = await service.append_message(
        role=MessageRole.MODEL, content="Anything else?", db_session=db_session
    )
    await service.append_feedback(
        message_id=follow_up, rating=Rating.POSITIVE, db_session=db_session
    )

    assert await selector.select(db_session=db_session) == []


async def test_negative_and_unrated_replies_are_excluded(service, selector, db_session):
    disliked = await exchange(service, db_session, "q1", "bad answer")
    await exchange(service, db_session, "q2", "unrated answer")
    liked = await exchange(service, db_session, "q3", "good answer")
    await service.append_feedback(message_id=disliked, rating=Rating.NEGATIVE, db_session=db_session)
    await service.append_feedback(message_id=liked, rating=Rating.POSITIVE, db_session=db_session)

    examples = await selector.select(db_session=db_session)

    assert as_pairs(examples) == [("q3", "good answer")]


async def test_at_most_five_newest_first(service, selector, db_session):
    for i in range(7):
        reply_id = await exchange(service, db_session, f"q{i}", f"a{i}")
        await service.append_feedback(
            message_id=reply_id, rating=Rating.POSITIVE, db_session=db_session
        )

    examples = await selector.select(db_session=db_session)

    assert as_pairs(examples) == [(f"q{i}", f"a{i}") for i in (6, 5, 4, 3, 2)]


async def test_ordered_by_feedback_time_not_message_id(service, selector, db_session):
    older_reply = await exchange(service, db_session, "old question", "old answer")
    newer_reply = await exchange(service, db_session, "new question", "new answer")
    base = datetime(2026, 1, 1, 12, 0, 0)
    # The older reply was rated later.
    db_session.add_all(
        [
            Feedback(message_id=newer_reply, rating=1, created_at=base),
            Feedback(message_id=older_reply, rating=1, created_at=base + timedelta(minutes=5)),
        ]
    )
    await db_session.commit()

    examples = await selector.select(db_session=db_session)

    assert as_pairs(examples) == [
        ("old question", "old answer"),
        ("new question", "new answer"),
    ]


async def test_repeated_calls_are_stable(service, selector, db_session):
    base = datetime(2026, 1, 1, 12, 0, 0)
    for i in range(4):
        reply_id = await exchange(service, db_session, f"q{i}", f"a{i}")
        # Identical timestamps: ties must still come back in the same order.
        db_session.add(Feedback(message_id=reply_id, rating=1, created_at=base))
    await db_session.commit()

    first = as_pairs(await selector.select(db_session=db_session))
    second = as_pairs(await selector.select(db_session=db_session))

    assert first == second
    assert len(first) == 4


async def test_pairs_are_adjacent_positive_replies(service, selector, db_session):
    for i in range(6):
        reply_id = await exchange(service, db_session, f"q{i}", f"a{i}")
        rating = Rating.POSITIVE if i % 2 == 0 else Rating.NEGATIVE
        await service.append_feedback(message_id=reply_id, rating=rating, db_session=db_session)

    examples = await selector.select(db_session=db_session)
    messages = MessageRepository(db_session)

    assert len(examples) == 3
    for example in examples:
        prompts = await messages.get_by_field("content", example.prompt)
        replies = await messages.get_by_field("content", example.response)
        assert replies[0].id == prompts[0].id + 1
        assert replies[0].role == MessageRole.MODEL.value
        assert prompts[0].role == MessageRole.USER.value


async def test_limit_is_configurable(service, db_session):
    for i in range(3):
        reply_id = await exchange(service, db_session, f"q{i}", f"a{i}")
        await service.append_feedback(
            message_id=reply_id, rating=Rating.POSITIVE, db_session=db_session
        )

    assert len(await ExampleSelector(limit=2).select(db_session=db_session)) == 2
    assert await ExampleSelector(limit=0).select(db_session=db_session) == []
