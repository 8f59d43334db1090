"""Election Workflow — mutating operations of the voting state machine.

Invariants:
    - Every route calls exactly one controller operation through
      election_service.apply_operation (lock -> apply -> persist)
    - Rejected operations surface as VotingError responses; nothing is persisted

Design Decisions:
    - Operations passed as lambdas: the route names the call, the service owns
      locking and persistence
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from voting.api.routes.election_lifecycle import get_principal
from voting.core.domain_types import PrincipalId, WorkflowStatus
from voting.infrastructure.database import get_db
from voting.schemas.election import (
    PhaseChange, PhaseResponse, ProposalCreate, ProposalResponse,
    VoteCreate, VoterCreate, VoterResponse,
)
from voting.services.election_service import apply_operation

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/elections", tags=["workflow"])


@router.post(
    "/{election_id}/voters", response_model=VoterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_voter(
    election_id: UUID,
    body: VoterCreate,
    caller: PrincipalId = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """Administrator registers an eligible voter."""
    principal = PrincipalId(body.principal)

    def operation(controller):
        controller.register_voter(caller, principal)
        return controller.get_voter(principal)

    voter = await apply_operation(
        db, election_id, operation, name="register_voter", principal=caller,
    )
    return VoterResponse.from_voter(principal, voter)


@router.post(
    "/{election_id}/proposals", response_model=ProposalResponse,
    status_code=status.HTTP_201_CREATED,
)
async def register_proposal(
    election_id: UUID,
    body: ProposalCreate,
    caller: PrincipalId = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """Registered voter submits a proposal."""

    def operation(controller):
        proposal_id = controller.register_proposal(caller, body.description)
        return controller.get_proposal(proposal_id)

    view = await apply_operation(
        db, election_id, operation, name="register_proposal", principal=caller,
    )
    return ProposalResponse.from_view(view)


@router.post(
    "/{election_id}/votes", response_model=VoterResponse,
    status_code=status.HTTP_201_CREATED,
)
async def cast_vote(
    election_id: UUID,
    body: VoteCreate,
    caller: PrincipalId = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """Registered voter casts their single vote."""

    def operation(controller):
        controller.cast_vote(caller, body.proposal_id)
        return controller.get_voter(caller)

    voter = await apply_operation(
        db, election_id, operation, name="cast_vote", principal=caller,
    )
    return VoterResponse.from_voter(caller, voter)


@router.post("/{election_id}/phase", response_model=PhaseResponse)
async def advance_phase(
    election_id: UUID,
    body: PhaseChange,
    caller: PrincipalId = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """Administrator moves the workflow to the next phase."""
    previous = await apply_operation(
        db, election_id,
        lambda controller: controller.advance_phase(caller, body.target),
        name="advance_phase", principal=caller,
    )
    return PhaseResponse(status=body.target, previous=previous)


@router.post("/{election_id}/reset", response_model=PhaseResponse)
async def reset_election(
    election_id: UUID,
    caller: PrincipalId = Depends(get_principal),
    db: AsyncSession = Depends(get_db),
):
    """Administrator clears a tallied election back to voter registration."""
    previous = await apply_operation(
        db, election_id,
        lambda controller: controller.reset_election(caller),
        name="reset_election", principal=caller,
    )
    return PhaseResponse(
        status=WorkflowStatus.REGISTERING_VOTERS, previous=previous,
    )
