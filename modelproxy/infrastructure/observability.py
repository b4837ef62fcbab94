"""Structured Logging - JSON formatter and setup for proxy observability.

Invariants:
    - All logs include timestamp, level, logger name, and message
    - Extra fields (public_type, internal_type, operation, scope, error_code) surfaced when present
    - JSON format by default, human-readable with fmt="text"

Design Decisions:
    - setup_logging called once at startup by modelproxy.main.lifespan
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "public_type", "internal_type", "operation", "scope", "error_code",
)


class JSONFormatter(logging.Formatter):
    """Format logs as JSON for structured logging."""

    def format(self, record: logging.LogRecord) -> str:
        log = {
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in EXTRA_FIELDS:
            val = record.__dict__.get(key)
            if val is not None:
                log[key] = val
        if record.exc_info:
            log["exception"] = self.formatException(record.exc_info)
        return json.dumps(log, ensure_ascii=False)


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Configure root logging; returns the installed handler."""
    handler = logging.StreamHandler()
    if fmt == "json":
        handler.setFormatter(JSONFormatter())
    else:
        handler.setFormatter(logging.Formatter(
            "%(asctime)s %(levelname)s %(name)s: %(message)s",
        ))
    logging.root.addHandler(handler)
    logging.root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
