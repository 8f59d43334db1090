"""Event Sinks — EventSink implementations for domain event delivery.

Invariants:
    - emit() never blocks on IO; persistence happens later from the outbox
    - CompositeEventSink delivers to every child even if one fails
    - RecordingEventSink keeps events in emission order until cleared

Design Decisions:
    - Outbox (RecordingEventSink) over writing from inside emit(): the controller
      is synchronous, the database is async; the service drains the outbox after
      the operation and commits events with the state snapshot
    - Sink failures logged, never raised: events are best-effort notifications
"""

import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from voting.core.protocols import EventSink

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class RecordedEvent:
    """One emitted event with its emission time."""
    name: str
    payload: dict[str, Any]
    emitted_at: datetime = field(
        default_factory=lambda: datetime.now(timezone.utc),
    )


class LoggingEventSink:
    """Writes each event as a structured INFO record."""

    def __init__(self, election_id: str | None = None):
        self._election_id = election_id

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        logger.info(
            f"Election event {event_name}",
            extra={
                "election_id": self._election_id,
                "event": event_name,
                "payload": payload,
            },
        )


class RecordingEventSink:
    """Buffers events until drained (outbox for persistence, probe for tests)."""

    def __init__(self):
        self._events: list[RecordedEvent] = []

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        self._events.append(RecordedEvent(name=event_name, payload=dict(payload)))

    @property
    def pending(self) -> list[RecordedEvent]:
        return list(self._events)

    def clear(self, count: int | None = None) -> None:
        """Drop the first `count` events (all when None)."""
        if count is None:
            self._events.clear()
        else:
            del self._events[:count]


class CompositeEventSink:
    """Fans one event out to several sinks, isolating their failures."""

    def __init__(self, *sinks: EventSink):
        self._sinks = sinks

    def emit(self, event_name: str, payload: dict[str, Any]) -> None:
        for sink in self._sinks:
            try:
                sink.emit(event_name, payload)
            except Exception as e:
                logger.warning(
                    f"{type(sink).__name__} failed on {event_name}: {e}",
                    extra={"event": event_name},
                    exc_info=True,
                )
