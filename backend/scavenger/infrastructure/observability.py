"""Structured Logging: directory-aware formatters and process-wide setup.

Invariants:
    - Every line carries the record's own creation time, level, logger and message
    - Directory context (operation, entity, entity_id, path) and write-plan
      context (steps, compensated) travel as `extra=` fields, never inside the message
    - setup_logging() is idempotent: calling it again replaces its own handler

Design Decisions:
    - JSON for deployments, key=value suffixes for local runs; same fields in both
    - SQLAlchemy and aiosqlite loggers capped at WARNING so store chatter stays out
"""

import json
import logging
from datetime import datetime, timezone

CONTEXT_FIELDS = (
    "operation", "entity", "entity_id", "path", "error_code",
    "steps", "compensated",
)

_QUIET_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool", "aiosqlite")


def _context(record: logging.LogRecord, fields) -> dict:
    return {
        key: record.__dict__[key]
        for key in fields
        if record.__dict__.get(key) is not None
    }


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def __init__(self, fields: tuple[str, ...] = CONTEXT_FIELDS):
        super().__init__()
        self.fields = fields

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **_context(record, self.fields),
        }
        if record.exc_info:
            payload["exception"] = self.formatException(record.exc_info)
        return json.dumps(payload, ensure_ascii=False, default=str)


class ContextTextFormatter(logging.Formatter):
    """Human-readable line with directory context appended as key=value pairs."""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)s %(name)s: %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        line = super().format(record)
        context = _context(record, CONTEXT_FIELDS)
        if not context:
            return line
        suffix = " ".join(f"{k}={v}" for k, v in context.items())
        first, sep, rest = line.partition("\n")
        return f"{first} [{suffix}]{sep}{rest}"


class _ScavengerHandler(logging.StreamHandler):
    pass


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install the stream handler on the root logger; returns it."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _ScavengerHandler)]:
        root.removeHandler(existing)
    handler = _ScavengerHandler()
    handler.setFormatter(JSONFormatter() if fmt == "json" else ContextTextFormatter())
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
    return handler
