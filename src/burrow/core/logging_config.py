"""Centralized logging configuration for burrow.

Usage:
    from burrow.core.logging_config import configure_logging, get_logger

    # Configure once at application startup
    configure_logging(level="DEBUG")

    # Get loggers in modules
    logger = get_logger(__name__)

Environment Variables:
    BURROW_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    BURROW_LOG_FORMAT: Output format ("text" or "json")
    BURROW_LOG_FILE: Optional log file path

Log records go to stderr or a file, never to a session's OutputSink, so
they do not interleave with REPL output written to stdout.
"""

from __future__ import annotations

import json
import logging
import os
import sys
from datetime import datetime
from typing import Any, Literal

TEXT_FORMAT = "%(asctime)s.%(msecs)03d - %(name)s - %(levelname)s - %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_STANDARD_ATTRS = set(logging.LogRecord("", 0, "", 0, "", (), None).__dict__) | {
    "message",
    "asctime",
    "taskName",
}

# Track if logging has been configured
_configured = False


class JsonFormatter(logging.Formatter):
    """JSON log formatter for structured logging.

    Outputs one JSON object per record:
    {
        "timestamp": "2026-10-19T14:30:00.123",
        "level": "DEBUG",
        "logger": "burrow.core.session",
        "message": "session_started: context=main",
        "extra": {...}
    }
    """

    def format(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        extra = {k: v for k, v in record.__dict__.items() if k not in _STANDARD_ATTRS}
        if extra:
            log_data["extra"] = extra

        return json.dumps(log_data, default=str)


def configure_logging(
    level: str | None = None,
    format: Literal["text", "json"] | None = None,
    file_path: str | None = None,
    force: bool = False,
) -> None:
    """Configure the ``burrow`` logger.

    Subsequent calls are ignored unless force=True. Arguments left as
    None fall back to BURROW_LOG_LEVEL (default "WARNING"),
    BURROW_LOG_FORMAT (default "text") and BURROW_LOG_FILE.

    Args:
        level: Log level name.
        format: Output format.
        file_path: Log to this file instead of stderr.
        force: Reconfigure even if already configured.
    """
    global _configured
    if _configured and not force:
        return

    level = level or os.environ.get("BURROW_LOG_LEVEL", "WARNING")
    format = format or os.environ.get("BURROW_LOG_FORMAT", "text")  # type: ignore[assignment]
    file_path = file_path or os.environ.get("BURROW_LOG_FILE")

    numeric_level = getattr(logging, level.upper(), None)
    if not isinstance(numeric_level, int):
        raise ValueError(f"Unknown log level: {level}")

    logger = logging.getLogger("burrow")
    logger.setLevel(numeric_level)
    logger.handlers.clear()

    if format == "json":
        formatter: logging.Formatter = JsonFormatter()
    else:
        formatter = logging.Formatter(TEXT_FORMAT, datefmt=DATE_FORMAT)

    handler: logging.Handler
    if file_path:
        handler = logging.FileHandler(file_path)
    else:
        handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(formatter)
    logger.addHandler(handler)

    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger with the given name (typically __name__)."""
    return logging.getLogger(name)
