"""Election Schemas — Pydantic models with field-level validation for API boundaries.

Invariants:
    - ElectionCreate.title: 1-200 chars, stripped, non-empty
    - Principals are opaque strings, 1-128 chars, never stripped or case-folded
    - ProposalCreate.description is kept verbatim (duplicate check is exact)
    - Proposal responses never carry voter identities

Design Decisions:
    - WorkflowStatus used directly as a field type: Pydantic validates the enum
    - Response models built from core views via from_view() helpers
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from voting.core.domain_types import WorkflowStatus
from voting.core.election_state import ProposalView, Voter

PRINCIPAL_PATTERN = r"^\S+$"


class ElectionCreate(BaseModel):
    """Election creation — the caller becomes the administrator."""
    title: str = Field(min_length=1, max_length=200)

    @field_validator("title")
    @classmethod
    def strip_title(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("title cannot be empty or whitespace")
        return v


class ElectionResponse(BaseModel):
    """Election summary — public-facing election data."""
    id: UUID
    title: str
    admin: str
    status: WorkflowStatus
    created_at: datetime
    updated_at: datetime


class ElectionDetail(ElectionResponse):
    """Election summary plus live counters from the in-memory state."""
    registered_voters: int
    proposal_count: int
    votes_cast: int


# --- Voters -------------------------------------------------------------------

class VoterCreate(BaseModel):
    principal: str = Field(min_length=1, max_length=128, pattern=PRINCIPAL_PATTERN)


class VoterResponse(BaseModel):
    principal: str
    is_registered: bool
    has_voted: bool
    voted_proposal_id: int

    @classmethod
    def from_voter(cls, principal: str, voter: Voter) -> "VoterResponse":
        return cls(
            principal=principal,
            is_registered=voter.is_registered,
            has_voted=voter.has_voted,
            voted_proposal_id=voter.voted_proposal_id,
        )


# --- Proposals ----------------------------------------------------------------

class ProposalCreate(BaseModel):
    description: str = Field(min_length=1, max_length=2000)


class ProposalResponse(BaseModel):
    id: int
    description: str
    vote_count: int

    @classmethod
    def from_view(cls, view: ProposalView) -> "ProposalResponse":
        return cls(id=view.id, description=view.description, vote_count=view.vote_count)


# --- Votes --------------------------------------------------------------------

class VoteCreate(BaseModel):
    proposal_id: int = Field(ge=0)


# --- Workflow -----------------------------------------------------------------

class PhaseChange(BaseModel):
    """Requested target phase for advance_phase."""
    target: WorkflowStatus


class PhaseResponse(BaseModel):
    status: WorkflowStatus
    previous: WorkflowStatus | None = None


class WinnerResponse(BaseModel):
    proposal_id: int
    description: str
    vote_count: int


class EventResponse(BaseModel):
    id: int
    name: str
    payload: dict
    created_at: datetime
