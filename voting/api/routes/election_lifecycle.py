"""Election Lifecycle — create, list, inspect and delete elections.

Invariants:
    - The caller identity is the opaque X-Principal header; whoever creates an
      election is its only administrator
    - User input is validated by Pydantic before reaching the route handler
    - Live counters come from the in-memory controller, not the DB row

Design Decisions:
    - get_principal exported for reuse by election_workflow (DRY over duplication)
    - Authentication is out of scope: the header is trusted as-is
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Header, Query, status
from sqlalchemy.ext.asyncio import AsyncSession

from voting.core.domain_types import PrincipalId, WorkflowStatus
from voting.infrastructure.database import get_db
from voting.models.election import Election as ElectionModel
from voting.schemas.election import (
    PRINCIPAL_PATTERN, ElectionCreate, ElectionDetail, ElectionResponse,
)
from voting.services import election_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/elections", tags=["elections"])


async def get_principal(
    x_principal: str = Header(
        ..., min_length=1, max_length=128, pattern=PRINCIPAL_PATTERN,
    ),
) -> PrincipalId:
    """Caller identity from the X-Principal header."""
    return PrincipalId(x_principal)


def _to_response(election: ElectionModel) -> ElectionResponse:
    return ElectionResponse(
        id=election.id,
        title=election.title,
        admin=election.admin_principal,
        status=WorkflowStatus(election.status),
        created_at=election.created_at,
        updated_at=election.updated_at,
    )


@router.post(
    "", response_model=ElectionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_election(
    body: ElectionCreate,
    caller: PrincipalId = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """Create a new election. The caller becomes its administrator."""
    election = await election_service.create_election(db, caller, body.title)
    return _to_response(election)


@router.get("")
async def list_elections(
    limit: int = Query(10, ge=1, le=100),
    offset: int = Query(0, ge=0),
    status_filter: WorkflowStatus | None = Query(None, alias="status"),
    db: AsyncSession = Depends(get_db),
):
    """List elections with pagination."""
    elections = await election_service.list_elections(
        db, limit=limit, offset=offset, status=status_filter,
    )
    return {
        "elections": [
            _to_response(e).model_dump(mode="json") for e in elections
        ],
        "pagination": {"limit": limit, "offset": offset},
    }


@router.get("/{election_id}", response_model=ElectionDetail)
async def get_election(
    election_id: UUID, db: AsyncSession = Depends(get_db),
):
    """Election details with live voter/proposal counters."""
    election, handle = await election_service.load_handle(db, election_id)
    state = handle.controller.state
    return ElectionDetail(
        **_to_response(election).model_dump(),
        registered_voters=state.registered_count,
        proposal_count=state.proposal_count,
        votes_cast=state.votes_cast,
    )


@router.delete(
    "/{election_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def delete_election(
    election_id: UUID,
    caller: PrincipalId = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """Delete an election and its event log. Administrator only."""
    await election_service.delete_election(db, election_id, caller)
