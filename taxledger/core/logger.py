from __future__ import annotations

import json
import logging
import sys
from typing import Any

from taxledger.core.config import settings

_RESERVED_ATTRS = frozenset(
    logging.LogRecord("", 0, "", 0, "", None, None).__dict__.keys()
) | {"message", "asctime"}

PLAIN_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

# Third-party loggers that flood INFO with per-statement output
_NOISY_LOGGERS = ("sqlalchemy.engine", "sqlalchemy.pool")


class JsonFormatter(logging.Formatter):
    """One JSON object per line; ``extra=`` fields land under ``extra``."""

    def format(self, record: logging.LogRecord) -> str:  # pragma: no cover - formatting logic
        payload: dict[str, Any] = {
            "timestamp": self.formatTime(record, self.datefmt),
            "level": record.levelname,
            "logger": record.name,
            "app": settings.APP_NAME,
            "env": settings.ENV,
            "message": record.getMessage(),
        }
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        extra = {
            key: value
            for key, value in record.__dict__.items()
            if not key.startswith("_") and key not in payload and key not in _RESERVED_ATTRS
        }
        if extra:
            payload["extra"] = extra
        return json.dumps(payload, default=str)


def init_logging(level: int | None = None, log_format: str | None = None) -> None:
    """Attach a single stdout handler to the root logger.

    Does nothing when the root logger already has handlers (pytest, or a
    host process that configured logging itself).
    """
    root = logging.getLogger()
    if root.handlers:
        return
    effective_level = level or getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
    handler = logging.StreamHandler(sys.stdout)
    if (log_format or settings.LOG_FORMAT).lower() == "json":
        handler.setFormatter(JsonFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))
    root.setLevel(effective_level)
    root.addHandler(handler)
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(effective_level, logging.WARNING))
