"""Workflow Enforcement — validates every operation against the election state.

Invariants:
    - All functions are PURE: no IO, no async, no side effects
    - Return the VotingError to raise on violation, None on success
    - Phases only move forward one step at a time; reset is the only way back

Design Decisions:
    - Pure functions over method dispatch: testable without a controller
    - Return errors (not raise): the controller composes checks with `or` and
      raises the first violation, keeping every check ahead of any mutation
"""

from voting.core.domain_types import PrincipalId, WorkflowStatus, next_status
from voting.core.election_state import ElectionState
from voting.core.errors import (
    AlreadyRegisteredError,
    AlreadyVotedError,
    DuplicateProposalError,
    EmptyProposalError,
    InvalidPhaseError,
    InvalidTransitionError,
    NoProposalsError,
    NoSuchProposalError,
    PhaseAlreadyActiveError,
    UnauthorizedError,
    VotingError,
)


# --- Roles --------------------------------------------------------------------

def check_admin(is_admin: bool, caller: PrincipalId) -> VotingError | None:
    if not is_admin:
        return UnauthorizedError(caller, "the election administrator")
    return None


def check_registered_voter(
    state: ElectionState, caller: PrincipalId,
) -> VotingError | None:
    if not state.is_registered(caller):
        return UnauthorizedError(caller, "a registered voter")
    return None


# --- Phase gates --------------------------------------------------------------

def check_phase(
    state: ElectionState, required: WorkflowStatus,
) -> VotingError | None:
    if state.status != required:
        return InvalidPhaseError(state.status.value, required.value)
    return None


def check_transition(
    state: ElectionState, target: WorkflowStatus,
) -> VotingError | None:
    """Rule: target must be the direct successor of the current phase.

    Moving into PROPOSALS_REGISTRATION_ENDED also needs >= 1 proposal.
    """
    if target == state.status:
        return PhaseAlreadyActiveError(target.value)

    if target != next_status(state.status):
        return InvalidTransitionError(state.status.value, target.value)

    if (
        target == WorkflowStatus.PROPOSALS_REGISTRATION_ENDED
        and not state.proposals
    ):
        return NoProposalsError()

    return None


# --- Operation-specific rules -------------------------------------------------

def check_not_registered(
    state: ElectionState, principal: PrincipalId,
) -> VotingError | None:
    if state.is_registered(principal):
        return AlreadyRegisteredError(principal)
    return None


def check_proposal_description(
    state: ElectionState, description: str,
) -> VotingError | None:
    if description == "":
        return EmptyProposalError()
    if state.has_description(description):
        return DuplicateProposalError(description)
    return None


def check_can_vote(
    state: ElectionState, voter: PrincipalId, proposal_id: int,
) -> VotingError | None:
    if state.voters[voter].has_voted:
        return AlreadyVotedError(voter)
    return check_proposal_exists(state, proposal_id)


def check_proposal_exists(
    state: ElectionState, proposal_id: int,
) -> VotingError | None:
    if not 0 <= proposal_id < len(state.proposals):
        return NoSuchProposalError(proposal_id)
    return None
