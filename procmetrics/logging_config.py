"""
Logging Configuration — Structured logging setup.

LOG_LEVEL picks the level (default INFO) and LOG_FORMAT picks ``json`` or
``text`` output (default text).

## Usage

    from procmetrics.logging_config import setup_logging

    setup_logging(settings.log_level, settings.log_format)
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime, timezone

# Record attributes copied into JSON output when a caller passes them via extra=
EXTRA_FIELDS = ("registry_count", "period")


class JSONFormatter(logging.Formatter):
    """One JSON object per record: ts, level, logger, message, extras."""

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.now(timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        entry.update({name: getattr(record, name) for name in EXTRA_FIELDS if hasattr(record, name)})

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


class HumanFormatter(logging.Formatter):
    """``12:34:56 INFO    [emitter        ] Message``"""

    def format(self, record: logging.LogRecord) -> str:
        module = record.name.rsplit(".", 1)[-1][:15]
        line = f"{datetime.now():%H:%M:%S} {record.levelname:7} [{module:15}] {record.getMessage()}"

        if record.exc_info:
            line = f"{line}\n{self.formatException(record.exc_info)}"
        return line


def setup_logging(level: str | None = None, format_type: str | None = None) -> None:
    """Install one stderr handler on the root logger."""
    log_level = (level or os.environ.get("LOG_LEVEL", "INFO")).upper()
    log_format = (format_type or os.environ.get("LOG_FORMAT", "text")).lower()
    numeric_level = getattr(logging, log_level, logging.INFO)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(JSONFormatter() if log_format == "json" else HumanFormatter())
    handler.setLevel(numeric_level)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()
    root.addHandler(handler)

    # Flask's dev server logs every scrape
    logging.getLogger("werkzeug").setLevel(logging.WARNING)
