"""Election Snapshot — serialization / deserialization for ElectionState.

Invariants:
    - to_snapshot produces a JSON-safe dict (no dataclasses, no Enums)
    - from_snapshot reconstructs an ElectionState from any valid snapshot dict
    - Missing keys fall back to ElectionState defaults (forward-compatible)
    - Voters cleared by reset survive the roundtrip with all flags false

Design Decisions:
    - Kept out of election_state.py: the state model stays free of format concerns
    - Voters stored as a dict keyed by principal, proposals as an ordered list:
      list order IS the proposal id, so it must never be re-sorted
"""

from voting.core.domain_types import PrincipalId, WorkflowStatus
from voting.core.election_state import ElectionState, Proposal, Voter

SNAPSHOT_VERSION = 1


def election_state_to_snapshot(state: ElectionState) -> dict:
    """Serialize ElectionState to JSON-safe dict. Pure, no IO."""
    return {
        "version": SNAPSHOT_VERSION,
        "status": state.status.value,
        "voters": {
            principal: {
                "is_registered": voter.is_registered,
                "has_voted": voter.has_voted,
                "voted_proposal_id": voter.voted_proposal_id,
            }
            for principal, voter in state.voters.items()
        },
        "voter_order": list(state.voter_order),
        "proposals": [
            {"description": p.description, "vote_count": p.vote_count}
            for p in state.proposals
        ],
    }


def election_state_from_snapshot(data: dict | None) -> ElectionState:
    """Reconstruct ElectionState from snapshot dict. Pure, no IO."""
    state = ElectionState()
    if not data:
        return state

    status_val = data.get("status")
    if status_val:
        state.status = WorkflowStatus(status_val)

    for principal, raw in data.get("voters", {}).items():
        state.voters[PrincipalId(principal)] = Voter(
            is_registered=raw.get("is_registered", False),
            has_voted=raw.get("has_voted", False),
            voted_proposal_id=raw.get("voted_proposal_id", 0),
        )
    state.voter_order = [PrincipalId(p) for p in data.get("voter_order", [])]
    state.proposals = [
        Proposal(description=raw["description"], vote_count=raw.get("vote_count", 0))
        for raw in data.get("proposals", [])
    ]
    return state
