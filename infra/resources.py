"""Infrastructure resources: relational store and chat model.

This module is part of the infra layer and must not import from application features.
"""
from typing import Optional

from langchain_core.language_models.chat_models import BaseChatModel
from langchain_openai import ChatOpenAI
from sqlalchemy import MetaData, event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)


def _enable_sqlite_foreign_keys(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    cursor.execute("PRAGMA foreign_keys=ON")
    cursor.close()


POSTGRES_SESSION_TIMEOUTS = {"lock_timeout": "4s", "statement_timeout": "8s"}


def _set_postgres_timeouts(dbapi_connection, _connection_record) -> None:
    cursor = dbapi_connection.cursor()
    for name, value in POSTGRES_SESSION_TIMEOUTS.items():
        cursor.execute(f"SET {name} = '{value}'")
    cursor.close()


class DatabaseResource:
    """Database resource for dependency injection."""

    def __init__(self, database_url: str):
        self.database_url = database_url
        self.engine: Optional[AsyncEngine] = None
        self.session_factory: Optional[async_sessionmaker[AsyncSession]] = None

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")

    async def init(self):
        """Initialize database connection."""
        if self.engine is not None:
            return self
        if self.is_sqlite:
            self.engine = create_async_engine(self.database_url, echo=False)
            # SQLite only checks REFERENCES clauses when asked to, per connection
            event.listen(
                self.engine.sync_engine, "connect", _enable_sqlite_foreign_keys
            )
        else:
            self.engine = create_async_engine(
                self.database_url,
                echo=False,
                pool_pre_ping=True,
                pool_recycle=3600,
            )
            # Session-level settings, so each new connection needs them
            event.listen(self.engine.sync_engine, "connect", _set_postgres_timeouts)
        self.session_factory = async_sessionmaker(
            bind=self.engine,
            class_=AsyncSession,
            expire_on_commit=False,
        )
        return self

    async def create_schema(self, metadata: MetaData) -> None:
        """Create missing tables. Safe to run on every startup."""
        if self.engine is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        async with self.engine.begin() as conn:
            await conn.run_sync(metadata.create_all)

    def get_session(self) -> AsyncSession:
        """Get database session (synchronous accessor)."""
        if self.session_factory is None:
            raise RuntimeError("Database not initialized. Call init() first.")
        return self.session_factory()

    async def shutdown(self):
        """Shutdown database connection."""
        if self.engine:
            await self.engine.dispose()
            self.engine = None
            self.session_factory = None


def build_chat_model(
    *, model: str, temperature: float, api_key: Optional[str] = None
) -> BaseChatModel:
    """Construct the default generation backend.

    No retries: a failed call surfaces to the caller on the first attempt.
    """
    return ChatOpenAI(
        model=model,
        temperature=temperature,
        api_key=api_key or None,
        max_retries=0,
    )
