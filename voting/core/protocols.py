"""Boundary Protocols — contracts between the election core and its collaborators.

Invariants:
    - Core NEVER imports from shell — dependency arrows point inward only
    - Access control and event delivery are supplied by the shell

Design Decisions:
    - Protocol over ABC: structural subtyping, no inheritance hierarchy
    - Both protocols are synchronous: the controller applies an operation
      and emits its event without suspending
"""

from typing import Any, Protocol

from voting.core.domain_types import PrincipalId


class AccessControl(Protocol):
    """Decides whether a caller holds the administrator capability."""
    def is_admin(self, caller: PrincipalId) -> bool: ...


class EventSink(Protocol):
    """Fire-and-forget receiver for domain events."""
    def emit(self, event_name: str, payload: dict[str, Any]) -> None: ...
