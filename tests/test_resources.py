from unittest.mock import MagicMock

from sqlalchemy import event

from infra.resources import (
    DatabaseResource,
    _enable_sqlite_foreign_keys,
    _set_postgres_timeouts,
)


def test_postgres_timeouts_run_on_each_connection():
    cursor = MagicMock()
    dbapi_connection = MagicMock()
    dbapi_connection.cursor.return_value = cursor

    _set_postgres_timeouts(dbapi_connection, None)

    statements = [c.args[0] for c in cursor.execute.call_args_list]
    assert statements == [
        "SET lock_timeout = '4s'",
        "SET statement_timeout = '8s'",
    ]
    cursor.close.assert_called_once()


async def test_postgres_engine_registers_timeouts_listener():
    db = DatabaseResource("postgresql+asyncpg://rl:rl@localhost:5432/rl_chat")
    await db.init()
    try:
        sync_engine = db.engine.sync_engine
        assert event.contains(sync_engine, "connect", _set_postgres_timeouts)
        assert not event.contains(sync_engine, "connect", _enable_sqlite_foreign_keys)
    finally:
        await db.shutdown()


async def test_sqlite_engine_only_enables_foreign_keys(database):
    sync_engine = database.engine.sync_engine

    assert event.contains(sync_engine, "connect", _enable_sqlite_foreign_keys)
    assert not event.contains(sync_engine, "connect", _set_postgres_timeouts)


async def test_init_is_idempotent(database):
    engine = database.engine

    await database.init()

    assert database.engine is engine
