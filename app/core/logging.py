# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Structured JSON logging. One JSON object per line on stdout.

Context passed through ``extra=`` (request id, store path, swap id ...) is
copied into the object when present, so data-quality warnings can be
filtered by the record they concern.
"""

import json
import logging
import sys
from datetime import datetime, timezone

from app.core.config import settings

CONTEXT_FIELDS = ("request_id", "store_path", "operation", "swap_id", "team_id", "date")


class JSONFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "timestamp": datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
            "level": record.levelname,
            "service": settings.SERVICE_NAME,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for field in CONTEXT_FIELDS:
            value = getattr(record, field, None)
            if value is not None:
                entry[field] = value
        if record.exc_info and record.exc_info[1]:
            exc = record.exc_info[1]
            entry["error"] = str(exc)
            entry["error_type"] = type(exc).__name__
        return json.dumps(entry, default=str)


_handler = logging.StreamHandler(sys.stdout)
_handler.setFormatter(JSONFormatter())


def get_logger(name: str | None = None) -> logging.Logger:
    """Logger writing JSON lines to stdout at LOG_LEVEL."""
    logger = logging.getLogger(name or settings.SERVICE_NAME)
    if _handler not in logger.handlers:
        logger.setLevel(getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO))
        logger.addHandler(_handler)
        logger.propagate = False
    return logger
