"""Election Controller — applies every workflow operation to one ElectionState.

Invariants:
    - Sole writer of its ElectionState; callers never mutate the state directly
    - Every check runs before any mutation: a failed call leaves state unchanged
      and emits nothing
    - Exactly one event is emitted per successful mutation, after the mutation
    - Calls are serialized through one lock (reads included), so no call
      observes a partially applied operation
    - Event sink failures are logged and never undo the mutation

Design Decisions:
    - Explicitly constructed per election (no module-level state): tests and the
      HTTP service build as many independent elections as they need
    - Authorization injected as an AccessControl capability, checked first
    - Rule checks live in enforce_workflow.py; this class only sequences
      check -> mutate -> emit
"""

import logging
import threading
from dataclasses import replace
from typing import Any

from voting.core.domain_types import EventName, PrincipalId, WorkflowStatus
from voting.core.election_state import ElectionState, ProposalView, Proposal, Voter
from voting.core.enforce_workflow import (
    check_admin,
    check_can_vote,
    check_not_registered,
    check_phase,
    check_proposal_description,
    check_proposal_exists,
    check_registered_voter,
    check_transition,
)
from voting.core.errors import (
    NoProposalsError,
    ResourceNotFoundError,
    TieDetectedError,
    VotingError,
)
from voting.core.protocols import AccessControl, EventSink
from voting.core.tally import tally

logger = logging.getLogger(__name__)


class ElectionController:
    """Phase state machine and tally for a single election."""

    def __init__(
        self,
        access: AccessControl,
        sink: EventSink,
        state: ElectionState | None = None,
    ):
        self._access = access
        self._sink = sink
        self._state = state if state is not None else ElectionState()
        self._lock = threading.RLock()

    @property
    def state(self) -> ElectionState:
        """The owned state. Read-only by convention (used for snapshots)."""
        return self._state

    # --- Mutations -------------------------------------------------------------

    def register_voter(self, admin: PrincipalId, principal: PrincipalId) -> None:
        with self._lock:
            _raise_first(
                check_admin(self._access.is_admin(admin), admin)
                or check_phase(self._state, WorkflowStatus.REGISTERING_VOTERS)
                or check_not_registered(self._state, principal)
            )
            voter = self._state.voters.setdefault(principal, Voter())
            voter.is_registered = True
            voter.has_voted = False
            voter.voted_proposal_id = 0
            self._state.voter_order.append(principal)
            self._emit(EventName.VOTER_REGISTERED, {"principal": principal})

    def register_proposal(self, voter: PrincipalId, description: str) -> int:
        """Append a proposal and return its id."""
        with self._lock:
            _raise_first(
                check_registered_voter(self._state, voter)
                or check_phase(
                    self._state, WorkflowStatus.PROPOSALS_REGISTRATION_STARTED,
                )
                or check_proposal_description(self._state, description)
            )
            self._state.proposals.append(Proposal(description=description))
            proposal_id = len(self._state.proposals) - 1
            self._emit(EventName.PROPOSAL_REGISTERED, {"proposal_id": proposal_id})
            return proposal_id

    def cast_vote(self, voter: PrincipalId, proposal_id: int) -> None:
        with self._lock:
            _raise_first(
                check_registered_voter(self._state, voter)
                or check_phase(self._state, WorkflowStatus.VOTING_SESSION_STARTED)
                or check_can_vote(self._state, voter, proposal_id)
            )
            record = self._state.voters[voter]
            record.has_voted = True
            record.voted_proposal_id = proposal_id
            self._state.proposals[proposal_id].vote_count += 1
            self._emit(
                EventName.VOTE_CAST, {"voter": voter, "proposal_id": proposal_id},
            )

    def advance_phase(
        self, admin: PrincipalId, target: WorkflowStatus,
    ) -> WorkflowStatus:
        """Move to `target` and return the previous phase."""
        with self._lock:
            _raise_first(
                check_admin(self._access.is_admin(admin), admin)
                or check_transition(self._state, target)
            )
            return self._set_status(target)

    def reset_election(self, admin: PrincipalId) -> WorkflowStatus:
        """Clear voters and proposals, return to REGISTERING_VOTERS."""
        with self._lock:
            _raise_first(
                check_admin(self._access.is_admin(admin), admin)
                or check_phase(self._state, WorkflowStatus.VOTES_TALLIED)
            )
            for principal in self._state.voter_order:
                voter = self._state.voters[principal]
                if voter.is_registered:
                    voter.clear()
            self._state.voter_order.clear()
            self._state.proposals.clear()
            return self._set_status(WorkflowStatus.REGISTERING_VOTERS)

    # --- Queries ---------------------------------------------------------------

    def get_phase(self) -> WorkflowStatus:
        with self._lock:
            return self._state.status

    def get_proposals(self) -> list[ProposalView]:
        with self._lock:
            return self._state.proposal_views()

    def get_proposal(self, proposal_id: int) -> ProposalView:
        with self._lock:
            _raise_first(check_proposal_exists(self._state, proposal_id))
            return self._state.proposal_views()[proposal_id]

    def get_voter(self, principal: PrincipalId) -> Voter:
        """Copy of the voter record, including records cleared by reset."""
        with self._lock:
            voter = self._state.voters.get(principal)
            if voter is None:
                raise ResourceNotFoundError("Voter", principal)
            return replace(voter)

    def get_winning_proposal(self) -> ProposalView:
        with self._lock:
            _raise_first(check_phase(self._state, WorkflowStatus.VOTES_TALLIED))
            if not self._state.proposals:
                raise NoProposalsError()
            result = tally(self._state.proposals)
            if result.is_tie:
                raise TieDetectedError(list(result.leader_ids), result.max_votes)
            return self._state.proposal_views()[result.winner_id]

    def get_winner(self) -> str:
        """Description of the unique most-voted proposal."""
        return self.get_winning_proposal().description

    # --- Internals -------------------------------------------------------------

    def _set_status(self, target: WorkflowStatus) -> WorkflowStatus:
        previous = self._state.status
        self._state.status = target
        self._emit(
            EventName.WORKFLOW_STATUS_CHANGED,
            {"previous": previous.value, "next": target.value},
        )
        return previous

    def _emit(self, name: EventName, payload: dict[str, Any]) -> None:
        try:
            self._sink.emit(name.value, payload)
        except Exception as e:
            logger.warning(
                f"Event sink failed for {name.value}: {e}",
                extra={"event": name.value},
                exc_info=True,
            )


def _raise_first(error: VotingError | None) -> None:
    if error is not None:
        raise error
