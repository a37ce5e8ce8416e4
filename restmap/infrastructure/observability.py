"""Structured Logging — JSON request/record log lines for a served RestMap application.

Invariants:
    - Every line carries timestamp, level, logger name and message
    - Store and gate context (resource, record_id, path, method, error_code)
      is lifted from `extra` into top-level keys when present
    - setup_logging installs exactly one RestMap handler on the root logger,
      however many times Application.start runs in a process

Design Decisions:
    - JSON in production, plain text (LOG_FORMAT=text) for local development
    - uvicorn runs with log_config=None, so its loggers propagate to this handler
"""

import json
import logging
from datetime import datetime, timezone

EXTRA_FIELDS = (
    "resource", "record_id", "path", "method", "error_code", "port",
)
TEXT_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


class JSONFormatter(logging.Formatter):
    """One JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        line = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        line.update(
            (key, record.__dict__[key]) for key in EXTRA_FIELDS
            if record.__dict__.get(key) is not None
        )
        if record.exc_info:
            line["exception"] = self.formatException(record.exc_info)
        return json.dumps(line, ensure_ascii=False, default=str)


class _RestMapHandler(logging.StreamHandler):
    """Marker type so setup_logging can find the handler it installed."""


def setup_logging(level: str = "INFO", fmt: str = "json") -> logging.Handler:
    """Install (or replace) the RestMap handler on the root logger."""
    root = logging.getLogger()
    for existing in [h for h in root.handlers if isinstance(h, _RestMapHandler)]:
        root.removeHandler(existing)

    handler = _RestMapHandler()
    handler.setFormatter(
        JSONFormatter() if fmt == "json" else logging.Formatter(TEXT_FORMAT),
    )
    root.addHandler(handler)
    root.setLevel(getattr(logging, level.upper(), logging.INFO))
    return handler
