"""Election Store Engine — async engine, request sessions and schema bootstrap.

Invariants:
    - A request session that raises a SQLAlchemy error is rolled back and the
      error resurfaces as DatabaseError (core/errors.py)
    - SQLite URLs get no pool sizing (their pool classes reject it)
    - get_db fails loudly when the store was never opened

Design Decisions:
    - One module-level ElectionStore, opened by the FastAPI lifespan
    - expire_on_commit=False: ORM rows stay readable after the service commits
    - Driver exception classes mapped through a table, most specific first
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator

from sqlalchemy import text
from sqlalchemy.exc import (
    DBAPIError, IntegrityError, OperationalError, SQLAlchemyError,
)
from sqlalchemy.ext.asyncio import (
    AsyncEngine, AsyncSession, async_sessionmaker, create_async_engine,
)

from voting.core.errors import DatabaseError

logger = logging.getLogger(__name__)

_FAILURES: tuple[tuple[type[SQLAlchemyError], str, str], ...] = (
    (IntegrityError, "Election data conflicts with stored rows", "commit"),
    (OperationalError, "Election store unreachable", "connect"),
    (DBAPIError, "Election store driver failure", "query"),
    (SQLAlchemyError, "Election store operation failed", "unknown"),
)


def _translate(exc: SQLAlchemyError) -> DatabaseError:
    for exc_type, message, operation in _FAILURES:
        if isinstance(exc, exc_type):
            return DatabaseError(message, operation)
    return DatabaseError("Election store operation failed", "unknown")


def _engine_for(url: str, pool_size: int, max_overflow: int) -> AsyncEngine:
    if url.startswith("sqlite"):
        return create_async_engine(url)
    return create_async_engine(
        url,
        pool_pre_ping=True,
        pool_size=pool_size,
        max_overflow=max_overflow,
        pool_recycle=3600,
    )


class ElectionStore:
    """Owns the engine backing election rows and their event log."""

    def __init__(
        self, database_url: str, pool_size: int = 20, max_overflow: int = 10,
    ):
        self.engine = _engine_for(database_url, pool_size, max_overflow)
        self._sessions = async_sessionmaker(
            self.engine, class_=AsyncSession, expire_on_commit=False,
        )

    @asynccontextmanager
    async def session(self) -> AsyncGenerator[AsyncSession, None]:
        async with self._sessions() as session:
            try:
                yield session
            except SQLAlchemyError as e:
                await session.rollback()
                logger.error(f"Election store error: {e}")
                raise _translate(e) from e

    async def ensure_schema(self) -> None:
        """Create missing tables. Deployments on Postgres run alembic instead."""
        from voting.db.base import Base
        import voting.models  # noqa: F401

        async with self.engine.begin() as conn:
            await conn.run_sync(Base.metadata.create_all)

    async def ping(self) -> bool:
        try:
            async with self._sessions() as session:
                await session.execute(text("SELECT 1"))
        except SQLAlchemyError as e:
            logger.error(f"Election store ping failed: {e}")
            return False
        return True

    async def close(self) -> None:
        await self.engine.dispose()


store: ElectionStore | None = None


def open_store(database_url: str, **kwargs) -> ElectionStore:
    global store
    store = ElectionStore(database_url, **kwargs)
    return store


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """FastAPI dependency: one session per request."""
    if store is None:
        raise RuntimeError("Election store not opened")
    async with store.session() as session:
        yield session
