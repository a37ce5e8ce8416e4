"""Root conftest — shared test configuration and database fixtures.

Invariants:
    - Every test gets a fresh in-memory SQLite database with fixture tables
    - Fixture models/controllers are discovered from tests/fixtures/ through the loader
    - No test reads a real .env secret

Design Decisions:
    - StaticPool: every session shares the single in-memory connection
"""

import os
from pathlib import Path

import jwt
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine
from sqlalchemy.pool import StaticPool

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_FORMAT", "text")

from restmap.application import Application  # noqa: E402
from restmap.db.base import Base  # noqa: E402
from restmap.db.registry import ModelRegistry  # noqa: E402
from restmap.infrastructure.database import DatabaseSessionManager  # noqa: E402
from restmap.infrastructure.loader import load_mapped_classes  # noqa: E402
from restmap.services.store import Store  # noqa: E402

FIXTURES_DIR = Path(__file__).parent / "fixtures"
MODELS_DIR = FIXTURES_DIR / "models"
CONTROLLERS_DIR = FIXTURES_DIR / "controllers"
JWT_SECRET = "restmap-test-secret-0123456789abcdef"

# Populates Base.metadata before any create_all
FIXTURE_MODELS = load_mapped_classes(MODELS_DIR)


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False, poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def registry():
    return ModelRegistry(FIXTURE_MODELS)


@pytest.fixture
def database(test_engine):
    return DatabaseSessionManager(test_engine)


@pytest.fixture
def store(registry, database):
    return Store(registry, database)


@pytest.fixture
def user_model(registry):
    return registry.resolve("user")


@pytest.fixture
async def seed_user(store):
    """Persist {firstName: "john"} and return its record."""
    return await store.create_record("user", {"firstName": "john"})


@pytest.fixture
def make_application(test_engine):
    """Application factory bound to the test engine and fixture directories."""
    def _make(**options):
        options.setdefault("controllers", {"dir": CONTROLLERS_DIR})
        options.setdefault(
            "database",
            {"connection": test_engine, "models": {"dir": MODELS_DIR}},
        )
        return Application(**options)
    return _make


@pytest.fixture
def make_client():
    def _make(app, **kwargs):
        return AsyncClient(
            transport=ASGITransport(app=app, **kwargs), base_url="http://test",
        )
    return _make


@pytest.fixture
def auth_header():
    def _make(claims=None, secret=JWT_SECRET):
        token = jwt.encode(claims or {"sub": "user-1"}, secret, algorithm="HS256")
        return {"Authorization": f"Bearer {token}"}
    return _make
