"""Structured logging helpers shared across SdsHarvest components."""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

__all__ = ["JSONFormatter", "ROOT_LOGGER_NAME", "setup_logging"]

ROOT_LOGGER_NAME = "SdsHarvest"

_EXTRA_FIELDS = ("url", "outcome", "kind", "path", "bytes_written")


class JSONFormatter(logging.Formatter):
    """Formatter emitting one JSON object per log record."""

    def format(self, record: logging.LogRecord) -> str:
        """Render ``record`` as a JSON string with download-specific fields."""

        now = datetime.now(timezone.utc)
        payload = {
            "timestamp": now.isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for name in _EXTRA_FIELDS:
            value = getattr(record, name, None)
            if value is not None:
                payload[name] = value
        if record.exc_info:
            payload["exc_info"] = self.formatException(record.exc_info)
        return json.dumps(payload)


def setup_logging(
    *,
    level: str = "INFO",
    json_log_path: Optional[Path] = None,
    max_log_size_mb: int = 10,
    propagate: bool = False,
) -> logging.Logger:
    """Configure the ``SdsHarvest`` logger with a console handler and optional JSON sidecar.

    Calling this repeatedly replaces the handlers it installed before.
    """

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(logger.handlers):
        if getattr(handler, "_sdsharvest_managed", False):
            logger.removeHandler(handler)
            if isinstance(handler, logging.FileHandler):
                handler.close()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter("%(asctime)s - %(levelname)s - %(message)s"))
    console._sdsharvest_managed = True  # type: ignore[attr-defined]
    logger.addHandler(console)

    if json_log_path is not None:
        json_log_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            json_log_path,
            maxBytes=int(max_log_size_mb * 1024 * 1024),
            backupCount=5,
            encoding="utf-8",
        )
        file_handler.setFormatter(JSONFormatter())
        file_handler._sdsharvest_managed = True  # type: ignore[attr-defined]
        logger.addHandler(file_handler)

    logger.propagate = propagate
    return logger
