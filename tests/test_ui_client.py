from dependency_injector import providers

from fakes import failing_llm
from streamlit_ui.client import (
    ALREADY_RATED,
    ERROR_REPLY,
    ChatApiClient,
    ChatMessage,
    Stats,
    mark_feedback,
)


def make_api(client) -> ChatApiClient:
    return ChatApiClient(base_url="http://testserver", http=client)


def test_exchange_stores_both_turns_linked(client):
    api = make_api(client)

    result = api.exchange([], "Hi")

    assert result.ok
    assert result.user.id == 1
    assert result.reply.id == 2
    assert result.reply.content == "Hello!"
    assert result.examples == []

    api.record_feedback(result.reply.id, 1)
    assert api.fetch_examples() == [{"prompt": "Hi", "response": "Hello!"}]


def test_second_exchange_sees_rated_examples(client):
    api = make_api(client)
    first = api.exchange([], "Hi")
    api.record_feedback(first.reply.id, 1)

    second = api.exchange([first.user, first.reply], "How are you?")

    assert second.ok
    assert second.examples == [{"prompt": "Hi", "response": "Hello!"}]


def test_exchange_failure_shows_apology_and_keeps_user_turn(app, client):
    app.container.infrastructure.chat_model.override(
        providers.Object(failing_llm(RuntimeError("bad key")))
    )
    api = make_api(client)

    result = api.exchange([], "Hi")

    assert not result.ok
    assert result.reply == ChatMessage(role="model", content=ERROR_REPLY)
    assert result.reply.id is None
    assert result.user.id == 1
    # the failed reply was never stored
    assert api.record_message("user", "again") == 2


def test_fetch_stats_tracks_feedback(client):
    api = make_api(client)
    result = api.exchange([], "Hi")

    assert api.fetch_stats() == Stats(total_responses=1)
    assert api.record_feedback(result.reply.id, -1) is True
    assert api.fetch_stats() == Stats(total_responses=1, positive=0, negative=1)


def test_positive_ratio():
    assert Stats().positive_ratio == 0.0
    assert Stats(total_responses=4, positive=3, negative=1).positive_ratio == 0.75


def test_duplicate_feedback_marks_message_rated(client):
    api = make_api(client)
    result = api.exchange([], "Hi")
    assert not result.reply.rated

    assert api.record_feedback(result.reply.id, 1) is True
    recorded = api.record_feedback(result.reply.id, -1)
    mark_feedback([result.user, result.reply], result.reply.id, -1, recorded)

    assert recorded is False
    assert result.reply.feedback == ALREADY_RATED
    assert not result.user.rated
    assert api.fetch_stats() == Stats(total_responses=1, positive=1, negative=0)


def test_mark_feedback_records_own_rating():
    reply = ChatMessage(role="model", content="Hello!", id=2)

    mark_feedback([reply], 2, -1, recorded=True)

    assert reply.feedback == -1
