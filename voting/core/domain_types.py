"""Domain Types — rich types that replace bare primitives across the codebase.

Invariants:
    - PrincipalId is opaque: never parsed, only compared for equality
    - ProposalId is the zero-based registration position of a proposal
    - WORKFLOW_ORDER lists the six phases in their only legal forward order

Design Decisions:
    - NewType over dataclass wrappers: zero runtime cost, full type-checker support
    - str Enums: serialize to JSON without custom encoders (snapshots, events, API)
"""

from enum import Enum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

ElectionId = NewType("ElectionId", UUID)
PrincipalId = NewType("PrincipalId", str)
ProposalId = NewType("ProposalId", int)


# ─── Enums ───────────────────────────────────────────────────────

class WorkflowStatus(str, Enum):
    """Election workflow phases — maps to DB `status` column."""
    REGISTERING_VOTERS = "registering_voters"
    PROPOSALS_REGISTRATION_STARTED = "proposals_registration_started"
    PROPOSALS_REGISTRATION_ENDED = "proposals_registration_ended"
    VOTING_SESSION_STARTED = "voting_session_started"
    VOTING_SESSION_ENDED = "voting_session_ended"
    VOTES_TALLIED = "votes_tallied"


class EventName(str, Enum):
    """Domain events emitted after a successful mutation."""
    VOTER_REGISTERED = "VoterRegistered"
    PROPOSAL_REGISTERED = "ProposalRegistered"
    VOTE_CAST = "VoteCast"
    WORKFLOW_STATUS_CHANGED = "WorkflowStatusChanged"


WORKFLOW_ORDER: tuple[WorkflowStatus, ...] = (
    WorkflowStatus.REGISTERING_VOTERS,
    WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
    WorkflowStatus.PROPOSALS_REGISTRATION_ENDED,
    WorkflowStatus.VOTING_SESSION_STARTED,
    WorkflowStatus.VOTING_SESSION_ENDED,
    WorkflowStatus.VOTES_TALLIED,
)


def next_status(status: WorkflowStatus) -> WorkflowStatus | None:
    """Successor in WORKFLOW_ORDER, or None for VOTES_TALLIED (reset only)."""
    position = WORKFLOW_ORDER.index(status)
    if position + 1 < len(WORKFLOW_ORDER):
        return WORKFLOW_ORDER[position + 1]
    return None
