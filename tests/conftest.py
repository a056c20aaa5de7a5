from typing import Iterator, List

import pytest
from dependency_injector import providers
from fastapi.testclient import TestClient
from langchain_core.language_models.fake_chat_models import FakeListChatModel

from api.shared.entities.registry import BaseEntity
from infra.resources import DatabaseResource


def sqlite_url(tmp_path) -> str:
    return f"sqlite+aiosqlite:///{tmp_path / 'rl_chat_test.db'}"


@pytest.fixture
async def database(tmp_path):
    db = DatabaseResource(sqlite_url(tmp_path))
    await db.init()
    await db.create_schema(BaseEntity.metadata)
    yield db
    await db.shutdown()


@pytest.fixture
async def db_session(database):
    session = database.get_session()
    try:
        yield session
    finally:
        await session.close()


@pytest.fixture
def llm_replies() -> List[str]:
    """Replies the default fake chat model hands out, in order."""
    return ["Hello!"]


@pytest.fixture
def chat_model(llm_replies):
    return FakeListChatModel(responses=llm_replies)


@pytest.fixture
def app(tmp_path, chat_model):
    from api.main import create_fastapi_app

    _app = create_fastapi_app()
    _app.container.infrastructure.database.override(
        providers.Object(DatabaseResource(sqlite_url(tmp_path)))
    )
    _app.container.infrastructure.chat_model.override(providers.Object(chat_model))
    yield _app
    _app.container.unwire()


@pytest.fixture
def client(app) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client
