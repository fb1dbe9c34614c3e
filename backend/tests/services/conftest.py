"""Service test fixtures — key/value media, persistence adapter, engine, API client.

Invariants:
    - Every test gets a fresh medium (in-memory dict or in-memory SQLite)
    - get_engine dependency overridden so routes hit the test engine
    - The clock is a FakeClock: timestamps are asserted exactly

Design Decisions:
    - SQLite in-memory for SQL medium tests: fast, no external dependency
    - Lifespan not run under ASGITransport; the engine is injected instead
"""

import pytest
from httpx import ASGITransport, AsyncClient

from snipvault.api.dependencies import get_engine
from snipvault.infrastructure.database import DatabaseSessionManager
from snipvault.infrastructure.kv_medium import InMemoryKeyValueMedium, SqlKeyValueMedium
from snipvault.main import app
from snipvault.services.persistent_store import SnippetPersistence
from snipvault.services.snippet_engine import SnippetEngine

from tests.services.fakes import STORE_KEY, FakeClock


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def medium():
    return InMemoryKeyValueMedium()


@pytest.fixture
def persistence(medium):
    return SnippetPersistence(medium, STORE_KEY)


@pytest.fixture
async def engine(persistence, clock):
    engine = await SnippetEngine.open(persistence, clock=clock)
    yield engine
    await engine.close()


@pytest.fixture
async def db_manager():
    manager = DatabaseSessionManager("sqlite+aiosqlite:///:memory:")
    await manager.create_schema()
    yield manager
    await manager.dispose()


@pytest.fixture
async def sql_medium(db_manager):
    return SqlKeyValueMedium(db_manager, quota_bytes=64 * 1024)


@pytest.fixture
async def client(engine):
    """FastAPI test client with the engine dependency overridden."""
    app.dependency_overrides[get_engine] = lambda: engine
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()
