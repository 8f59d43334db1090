"""Election Service — runs controller operations and persists their outcome.

Invariants:
    - One ElectionHandle per election id in _elections (in-memory, per process)
    - Lookup order: _elections dict -> Election.state_snapshot -> 404
    - Mutations for one election run under that election's asyncio.Lock, so
      snapshots and events are committed in operation order
    - A successful mutation commits the new snapshot and every buffered event
      in one transaction; the outbox is only cleared after that commit
    - Failed operations raise before anything is written

Design Decisions:
    - _elections as module-level dict: single-process uvicorn, state rebuilt
      from snapshots after a restart
    - Controller stays synchronous; this module is the async shell around it
    - VotingError context (election, principal, operation) filled in here,
      where the request is known, not in the core
"""

import asyncio
import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, TypeVar
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from voting.core.domain_types import PrincipalId, WorkflowStatus
from voting.core.election_controller import ElectionController
from voting.core.election_snapshot import (
    election_state_from_snapshot, election_state_to_snapshot,
)
from voting.core.election_state import ElectionState
from voting.core.errors import (
    DatabaseError, ResourceNotFoundError, UnauthorizedError, VotingError,
)
from voting.infrastructure.access_control import SingleAdminAccess
from voting.infrastructure.event_sinks import (
    CompositeEventSink, LoggingEventSink, RecordingEventSink,
)
from voting.models.election import Election as ElectionModel
from voting.models.election_event import ElectionEvent

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass
class ElectionHandle:
    """Live controller for one election plus its event outbox and write lock."""
    controller: ElectionController
    outbox: RecordingEventSink
    lock: asyncio.Lock


_elections: dict[UUID, ElectionHandle] = {}


def live_count() -> int:
    """Number of elections with a live handle in this process."""
    return len(_elections)


def build_handle(
    election_id: UUID, admin: str, state: ElectionState | None = None,
) -> ElectionHandle:
    outbox = RecordingEventSink()
    sink = CompositeEventSink(LoggingEventSink(str(election_id)), outbox)
    controller = ElectionController(
        SingleAdminAccess(PrincipalId(admin)), sink, state,
    )
    return ElectionHandle(controller=controller, outbox=outbox, lock=asyncio.Lock())


# --- Lifecycle ----------------------------------------------------------------

async def create_election(
    db: AsyncSession, admin: PrincipalId, title: str,
) -> ElectionModel:
    state = ElectionState()
    election = ElectionModel(
        title=title,
        admin_principal=admin,
        status=state.status.value,
        state_snapshot=election_state_to_snapshot(state),
    )
    db.add(election)
    await db.commit()
    await db.refresh(election)
    _elections[election.id] = build_handle(election.id, admin, state)
    logger.info(
        f"Election {election.id} created",
        extra={"election_id": str(election.id), "principal": admin},
    )
    return election


async def get_election_or_404(
    db: AsyncSession, election_id: UUID,
) -> ElectionModel:
    result = await db.execute(
        select(ElectionModel).where(ElectionModel.id == election_id),
    )
    election = result.scalar_one_or_none()
    if election is None:
        raise ResourceNotFoundError("Election", str(election_id))
    return election


async def load_handle(
    db: AsyncSession, election_id: UUID,
) -> tuple[ElectionModel, ElectionHandle]:
    """Return the election row and its live handle, restoring from snapshot."""
    election = await get_election_or_404(db, election_id)
    handle = _elections.get(election_id)
    if handle is None:
        state = election_state_from_snapshot(election.state_snapshot)
        handle = _elections.setdefault(
            election_id,
            build_handle(election_id, election.admin_principal, state),
        )
        logger.info(
            "Restored election from DB snapshot",
            extra={"election_id": str(election_id)},
        )
    return election, handle


async def list_elections(
    db: AsyncSession,
    limit: int = 10,
    offset: int = 0,
    status: WorkflowStatus | None = None,
) -> list[ElectionModel]:
    query = select(ElectionModel).order_by(ElectionModel.created_at.desc())
    if status is not None:
        query = query.where(ElectionModel.status == status.value)
    result = await db.execute(query.limit(limit).offset(offset))
    return list(result.scalars().all())


async def delete_election(
    db: AsyncSession, election_id: UUID, caller: PrincipalId,
) -> None:
    """Admin-only: drop the election, its events, and its live handle."""
    election = await get_election_or_404(db, election_id)
    if not SingleAdminAccess(PrincipalId(election.admin_principal)).is_admin(caller):
        raise UnauthorizedError(caller, "the election administrator")
    await db.execute(
        delete(ElectionEvent).where(ElectionEvent.election_id == election_id),
    )
    await db.delete(election)
    await db.commit()
    _elections.pop(election_id, None)
    logger.info(
        f"Election {election_id} deleted",
        extra={"election_id": str(election_id), "principal": caller},
    )


# --- Operations ---------------------------------------------------------------

async def apply_operation(
    db: AsyncSession,
    election_id: UUID,
    operation: Callable[[ElectionController], T],
    *,
    name: str,
    principal: str | None = None,
) -> T:
    """Run a mutating controller call, then persist snapshot and events."""
    election, handle = await load_handle(db, election_id)
    async with handle.lock:
        try:
            result = operation(handle.controller)
        except VotingError as e:
            _annotate(e, election_id, principal, name)
            raise
        await _persist(db, election, handle)
    return result


async def run_query(
    db: AsyncSession,
    election_id: UUID,
    query: Callable[[ElectionController], T],
    *,
    name: str,
    principal: str | None = None,
) -> T:
    """Run a read-only controller call against the live election."""
    _, handle = await load_handle(db, election_id)
    try:
        return query(handle.controller)
    except VotingError as e:
        _annotate(e, election_id, principal, name)
        raise


async def list_events(
    db: AsyncSession, election_id: UUID, limit: int = 100, offset: int = 0,
) -> list[ElectionEvent]:
    await get_election_or_404(db, election_id)
    result = await db.execute(
        select(ElectionEvent)
        .where(ElectionEvent.election_id == election_id)
        .order_by(ElectionEvent.id)
        .limit(limit)
        .offset(offset),
    )
    return list(result.scalars().all())


# --- Helpers ------------------------------------------------------------------

async def _persist(
    db: AsyncSession, election: ElectionModel, handle: ElectionHandle,
) -> None:
    """Commit snapshot + buffered events. Outbox cleared only on success."""
    # rollback expires the row, so its id is read before the commit
    election_id = election.id
    state = handle.controller.state
    events = handle.outbox.pending
    election.state_snapshot = election_state_to_snapshot(state)
    election.status = state.status.value
    election.updated_at = datetime.now(timezone.utc)
    for event in events:
        db.add(ElectionEvent(
            election_id=election_id,
            name=event.name,
            payload=event.payload,
            created_at=event.emitted_at,
        ))
    try:
        await db.commit()
    except SQLAlchemyError as e:
        await db.rollback()
        logger.error(
            f"Failed to persist election state: {e}",
            extra={"election_id": str(election_id)},
        )
        raise DatabaseError("Election state not saved", "commit") from e
    handle.outbox.clear(len(events))


def _annotate(
    error: VotingError, election_id: UUID, principal: str | None, operation: str,
) -> None:
    error.context.election_id = str(election_id)
    error.context.principal = principal
    error.context.operation = operation
