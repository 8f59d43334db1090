"""Election store tests — schema bootstrap, ping and error translation."""

import pytest
from sqlalchemy import select, text

import voting.infrastructure.database as database
from voting.core.errors import DatabaseError
from voting.infrastructure.database import ElectionStore
from voting.models.election import Election


@pytest.fixture
async def store(tmp_path):
    s = ElectionStore(f"sqlite+aiosqlite:///{tmp_path}/voting.db")
    yield s
    await s.close()


async def test_ping_reports_reachable_store(store):
    assert await store.ping() is True


async def test_ensure_schema_creates_election_tables(store):
    await store.ensure_schema()
    async with store.session() as session:
        result = await session.execute(select(Election))
        assert result.scalars().all() == []


async def test_session_translates_store_errors(store):
    with pytest.raises(DatabaseError) as exc:
        async with store.session() as session:
            await session.execute(text("SELECT * FROM no_such_table"))
    assert exc.value.code == "DATABASE_ERROR"
    assert exc.value.http_status == 503


async def test_get_db_requires_open_store(monkeypatch):
    monkeypatch.setattr(database, "store", None)
    with pytest.raises(RuntimeError):
        await database.get_db().__anext__()
