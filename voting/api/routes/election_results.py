"""Election Results — read-only queries: phase, voters, proposals, winner, events.

Invariants:
    - No route here mutates state or takes the per-election write lock
    - Proposal listings expose description and count only, never voter identities
    - Winner is only reported for a tallied election with a unique maximum
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, Path, Query
from sqlalchemy.ext.asyncio import AsyncSession

from voting.core.domain_types import PrincipalId
from voting.infrastructure.database import get_db
from voting.schemas.election import (
    PRINCIPAL_PATTERN, EventResponse, PhaseResponse, ProposalResponse,
    VoterResponse, WinnerResponse,
)
from voting.services.election_service import list_events, run_query

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/elections", tags=["results"])


@router.get("/{election_id}/phase", response_model=PhaseResponse)
async def get_phase(election_id: UUID, db: AsyncSession = Depends(get_db)):
    status = await run_query(
        db, election_id, lambda c: c.get_phase(), name="get_phase",
    )
    return PhaseResponse(status=status)


@router.get("/{election_id}/voters/{principal}", response_model=VoterResponse)
async def get_voter(
    election_id: UUID,
    principal: str = Path(min_length=1, max_length=128, pattern=PRINCIPAL_PATTERN),
    db: AsyncSession = Depends(get_db),
):
    voter = await run_query(
        db, election_id, lambda c: c.get_voter(PrincipalId(principal)),
        name="get_voter",
    )
    return VoterResponse.from_voter(principal, voter)


@router.get(
    "/{election_id}/proposals", response_model=list[ProposalResponse],
)
async def get_proposals(election_id: UUID, db: AsyncSession = Depends(get_db)):
    views = await run_query(
        db, election_id, lambda c: c.get_proposals(), name="get_proposals",
    )
    return [ProposalResponse.from_view(v) for v in views]


@router.get(
    "/{election_id}/proposals/{proposal_id}", response_model=ProposalResponse,
)
async def get_proposal(
    election_id: UUID, proposal_id: int, db: AsyncSession = Depends(get_db),
):
    view = await run_query(
        db, election_id, lambda c: c.get_proposal(proposal_id),
        name="get_proposal",
    )
    return ProposalResponse.from_view(view)


@router.get("/{election_id}/winner", response_model=WinnerResponse)
async def get_winner(election_id: UUID, db: AsyncSession = Depends(get_db)):
    """Winning proposal; 409 TIE_DETECTED when the maximum is shared."""
    view = await run_query(
        db, election_id, lambda c: c.get_winning_proposal(), name="get_winner",
    )
    return WinnerResponse(
        proposal_id=view.id, description=view.description,
        vote_count=view.vote_count,
    )


@router.get("/{election_id}/events", response_model=list[EventResponse])
async def get_events(
    election_id: UUID,
    limit: int = Query(100, ge=1, le=1000),
    offset: int = Query(0, ge=0),
    db: AsyncSession = Depends(get_db),
):
    """Persisted domain events in emission order."""
    events = await list_events(db, election_id, limit=limit, offset=offset)
    return [
        EventResponse(
            id=e.id, name=e.name, payload=e.payload, created_at=e.created_at,
        )
        for e in events
    ]
