"""Database Session Manager — rollback on error, health check, URL construction."""

import pytest
from sqlalchemy import select

from restmap.infrastructure.database import DatabaseSessionManager


async def test_health_check(database):
    assert await database.health_check() is True


async def test_session_rolls_back_on_exception(database, user_model):
    with pytest.raises(RuntimeError):
        async with database.session() as db:
            db.add(user_model(firstName="ghost"))
            await db.flush()
            raise RuntimeError("boom")

    async with database.session() as db:
        rows = (await db.execute(select(user_model))).scalars().all()
    assert rows == []


async def test_from_url_builds_sqlite_engine():
    manager = DatabaseSessionManager.from_url("sqlite+aiosqlite:///:memory:")
    try:
        assert manager.engine.dialect.name == "sqlite"
        assert await manager.health_check() is True
    finally:
        await manager.dispose()
