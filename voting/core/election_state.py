"""Election State — in-memory data model for one election workflow.

Invariants:
    - status is always one of the six WorkflowStatus values
    - Voters are never removed from `voters`; reset clears their flags instead
    - voter_order lists each registered principal once, in registration order
    - A proposal's id is its index in `proposals` (stable until reset)
    - vote_count of a proposal equals the number of voters whose
      voted_proposal_id points at it

Design Decisions:
    - Pure dataclasses, no IO: mutated only by ElectionController
    - violations() reports broken invariants instead of raising, so tests and
      snapshot restore can inspect a state without failing fast
"""

from dataclasses import dataclass, field

from voting.core.domain_types import PrincipalId, WorkflowStatus


@dataclass
class Voter:
    """Registration and ballot flags for one principal."""
    is_registered: bool = False
    has_voted: bool = False
    voted_proposal_id: int = 0

    def clear(self) -> None:
        self.is_registered = False
        self.has_voted = False
        self.voted_proposal_id = 0


@dataclass
class Proposal:
    """A proposal and its running vote count."""
    description: str
    vote_count: int = 0


@dataclass(frozen=True)
class ProposalView:
    """Read-only proposal as exposed to callers (never includes who voted)."""
    id: int
    description: str
    vote_count: int


@dataclass
class ElectionState:
    """Per-election workflow state — pure dataclass, no IO."""

    voters: dict[PrincipalId, Voter] = field(default_factory=dict)
    voter_order: list[PrincipalId] = field(default_factory=list)
    proposals: list[Proposal] = field(default_factory=list)
    status: WorkflowStatus = WorkflowStatus.REGISTERING_VOTERS

    # --- Computed properties ---------------------------------------------------

    @property
    def proposal_count(self) -> int:
        return len(self.proposals)

    @property
    def registered_count(self) -> int:
        """Number of principals with an active registration."""
        return sum(1 for v in self.voters.values() if v.is_registered)

    @property
    def votes_cast(self) -> int:
        """Number of voters who have voted."""
        return sum(1 for v in self.voters.values() if v.has_voted)

    @property
    def total_votes(self) -> int:
        """Sum of vote counts across all proposals."""
        return sum(p.vote_count for p in self.proposals)

    # --- Lookups ---------------------------------------------------------------

    def is_registered(self, principal: PrincipalId) -> bool:
        voter = self.voters.get(principal)
        return voter is not None and voter.is_registered

    def has_description(self, description: str) -> bool:
        """Exact, case-sensitive match against existing proposals."""
        return any(p.description == description for p in self.proposals)

    def proposal_views(self) -> list[ProposalView]:
        return [
            ProposalView(id=i, description=p.description, vote_count=p.vote_count)
            for i, p in enumerate(self.proposals)
        ]

    # --- Consistency checks ----------------------------------------------------

    def violations(self) -> list[str]:
        """List every broken invariant. Empty list means consistent."""
        problems: list[str] = []

        if not isinstance(self.status, WorkflowStatus):
            problems.append(f"unknown status {self.status!r}")

        if len(set(self.voter_order)) != len(self.voter_order):
            problems.append("voter_order contains duplicates")
        for principal in self.voter_order:
            if not self.is_registered(principal):
                problems.append(f"voter_order lists unregistered '{principal}'")

        expected = [0] * len(self.proposals)
        for principal, voter in self.voters.items():
            if not voter.has_voted:
                continue
            if not voter.is_registered:
                problems.append(f"'{principal}' voted without registration")
            if not 0 <= voter.voted_proposal_id < len(self.proposals):
                problems.append(
                    f"'{principal}' voted for missing proposal {voter.voted_proposal_id}"
                )
                continue
            expected[voter.voted_proposal_id] += 1

        for i, proposal in enumerate(self.proposals):
            if proposal.vote_count != expected[i]:
                problems.append(
                    f"proposal {i} counts {proposal.vote_count} vote(s), "
                    f"voters point at it {expected[i]} time(s)"
                )

        descriptions = [p.description for p in self.proposals]
        if len(set(descriptions)) != len(descriptions):
            problems.append("duplicate proposal descriptions")

        return problems
