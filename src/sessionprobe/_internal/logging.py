"""Structured logging setup for SessionProbe."""

from __future__ import annotations

import json
import logging
import sys
from datetime import UTC, datetime
from typing import TextIO

# Attributes passed through ``extra=`` that the JSON formatter promotes
# to top-level keys.
_CONTEXT_FIELDS = ("scenario", "step", "status", "session_token")


class _JsonFormatter(logging.Formatter):
    """One-line JSON formatter.

    Emits objects with keys: timestamp, level, logger, message, plus any
    scenario context passed via ``extra``.
    """

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, object] = {
            "timestamp": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        for key in _CONTEXT_FIELDS:
            if hasattr(record, key):
                entry[key] = getattr(record, key)
        if record.exc_info and record.exc_info[1] is not None:
            entry["exception"] = self.formatException(record.exc_info)
        return json.dumps(entry)


def setup_logging(
    level: int = logging.INFO,
    *,
    json_format: bool = False,
    stream: TextIO | None = None,
) -> logging.Logger:
    """Configure and return the ``sessionprobe`` logger.

    Repeated calls only adjust the level; handlers are never duplicated.

    Args:
        level: Logging level (e.g., ``logging.DEBUG``). Defaults to INFO.
        json_format: Emit one JSON object per line instead of plain text.
        stream: Output stream. Defaults to ``sys.stderr``.

    Returns:
        The configured ``sessionprobe`` logger.
    """
    logger = logging.getLogger("sessionprobe")
    logger.setLevel(level)

    if logger.handlers:
        for handler in logger.handlers:
            handler.setLevel(level)
        return logger

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setLevel(level)

    if json_format:
        formatter: logging.Formatter = _JsonFormatter()
    else:
        formatter = logging.Formatter(
            "%(asctime)s [%(levelname)-8s] %(name)s: %(message)s",
            datefmt="%H:%M:%S",
        )
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    # Prevent duplicate output through the root logger
    logger.propagate = False
    return logger


def get_logger(name: str) -> logging.Logger:
    """Return a child logger under the ``sessionprobe`` namespace.

    Example: ``get_logger("engine.runner")`` returns
    ``logging.getLogger("sessionprobe.engine.runner")``.
    """
    return logging.getLogger(f"sessionprobe.{name}")
