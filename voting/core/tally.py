"""Tally — ranks proposals by vote count and detects ties.

Invariants:
    - Pure function over a proposal list: no IO, no mutation
    - Every proposal holding the maximum is counted; a tie is never resolved
      by picking an arbitrary holder
    - Zero proposals yields max_votes == 0 and no leaders

Design Decisions:
    - Two passes (max, then holders) so "unique maximum" and "tied maximum"
      are distinguished explicitly
    - TallyResult is returned instead of raising: the controller decides
      which error to surface
"""

from dataclasses import dataclass

from voting.core.election_state import Proposal


@dataclass(frozen=True)
class TallyResult:
    """Outcome of a tally pass."""
    max_votes: int
    leader_ids: tuple[int, ...]

    @property
    def is_tie(self) -> bool:
        return len(self.leader_ids) > 1

    @property
    def winner_id(self) -> int | None:
        """Id of the unique leader, None on tie or with no proposals."""
        if len(self.leader_ids) == 1:
            return self.leader_ids[0]
        return None


def tally(proposals: list[Proposal]) -> TallyResult:
    """Compute the maximum vote count and every proposal holding it."""
    max_votes = 0
    for proposal in proposals:
        if proposal.vote_count > max_votes:
            max_votes = proposal.vote_count

    leaders = tuple(
        i for i, proposal in enumerate(proposals)
        if proposal.vote_count == max_votes
    )
    return TallyResult(max_votes=max_votes, leader_ids=leaders)
