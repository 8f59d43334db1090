"""Service fixtures — in-memory election store and an HTTP client bound to it.

Invariants:
    - Each test gets its own empty in-memory SQLite database
    - Routes receive sessions from that database through a get_db override
    - The live election registry starts and ends every test empty
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import voting.models  # noqa: F401
from voting.db.base import Base
from voting.infrastructure.database import get_db
from voting.main import app
from voting.services import election_service


@pytest.fixture(autouse=True)
def clear_registry():
    election_service._elections.clear()
    yield
    election_service._elections.clear()


@pytest.fixture
async def test_session_factory():
    # StaticPool: every session shares the one in-memory connection
    engine = create_async_engine("sqlite+aiosqlite:///:memory:", poolclass=StaticPool)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    await engine.dispose()


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
async def client(test_session_factory):
    async def sessions_for_test():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = sessions_for_test
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as c:
        yield c
    app.dependency_overrides.pop(get_db, None)
