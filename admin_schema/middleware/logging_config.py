"""
Logging setup for schema derivation.

- Development / testing: one line per record, prefixed with the model being built
- Production: one JSON object per record
- Level: LOG_LEVEL env variable
"""

import json
import logging
import os
import sys
from datetime import datetime, timezone

# Structured fields passed through ``extra={...}``
EXTRA_FIELDS = ("model", "stage", "duration_ms", "models")


class JSONFormatter(logging.Formatter):
    """One JSON document per record."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update(
            (key, getattr(record, key))
            for key in EXTRA_FIELDS
            if getattr(record, key, None) is not None
        )
        if record.exc_info and record.exc_info[0] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False, default=str)


class ReadableFormatter(logging.Formatter):
    """``12:00:01 ERROR    admin_schema.schema.builder [Post/build] message``"""

    def __init__(self):
        super().__init__("%(asctime)s %(levelname)-8s %(name)s%(context)s %(message)s", "%H:%M:%S")

    def format(self, record: logging.LogRecord) -> str:
        model = getattr(record, "model", None)
        stage = getattr(record, "stage", None)
        parts = [p for p in (model, stage) if p]
        record.context = f" [{'/'.join(parts)}]" if parts else ""
        return super().format(record)


def configure_logging(app):
    """Install a single stderr handler on the root logger for *app*."""
    is_testing = app.config.get("TESTING", False)
    is_prod = not app.config.get("DEBUG", False) and not is_testing

    level_name = os.getenv("LOG_LEVEL", "INFO" if is_prod else "DEBUG").upper()
    level = getattr(logging, level_name, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if is_prod else ReadableFormatter())

    # Replaced, not appended, so repeated create_app() calls in tests don't stack handlers
    root = logging.getLogger()
    root.handlers[:] = [handler]
    root.setLevel(level)

    # SQL echo and migration chatter stay at WARNING unless asked for explicitly
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("alembic").setLevel(logging.WARNING)

    app.logger.setLevel(level)
