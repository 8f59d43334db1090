"""Structured Logging — one JSON object per log line, tagged with election context.

Invariants:
    - Every line carries timestamp, level, logger and message
    - Election context passed through `extra=` (election_id, principal, event,
      payload, error_code, status, path) is copied onto the line when present
    - Values the json module cannot encode (UUID, enums) are stringified

Design Decisions:
    - stdlib logging with a custom Formatter; no logging library needed
    - configure_logging replaces previously installed root handlers so a
      reload does not duplicate output
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "election_id", "principal", "event", "payload",
    "error_code", "status", "path",
)

TEXT_FORMAT = "%(asctime)s %(levelname)-7s %(name)s [%(election_id)s] %(message)s"


class JSONFormatter(logging.Formatter):
    """Render a record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": datetime.fromtimestamp(
                record.created, tz=timezone.utc,
            ).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(
            (field, getattr(record, field))
            for field in CONTEXT_FIELDS
            if getattr(record, field, None) is not None
        )
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


class _ElectionDefault(logging.Filter):
    """Fill election_id with '-' so the text format never fails."""

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "election_id"):
            record.election_id = "-"
        return True


def configure_logging(level: str = "INFO", fmt: str = "json") -> None:
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.addFilter(_ElectionDefault())
        handler.setFormatter(logging.Formatter(TEXT_FORMAT))
    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
