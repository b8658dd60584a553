"""Logging configuration helpers for the triage package.

The package is silent by default (``NullHandler``). The desk application, or
any embedding program, opts in with one of the helpers below.

Environment variables read by :func:`configure_from_env`:
    TRIAGE_LOGGING: log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    TRIAGE_LOG_FILE: path of a rotating log file
    TRIAGE_LOG_JSON: "1" for JSON lines on stderr
"""

from __future__ import annotations

from datetime import datetime, timezone
import json
import logging
from logging.handlers import RotatingFileHandler
import os
from pathlib import Path
from typing import Literal, Mapping, Optional

__all__ = [
    "configure_from_env",
    "disable_logging",
    "enable_console_logging",
    "enable_file_logging",
    "enable_json_logging",
    "set_level",
]

DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
DEFAULT_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

DEFAULT_MAX_BYTES = 1024 * 1024
DEFAULT_BACKUP_COUNT = 3

LOGGER_NAME = "triage"

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class JsonFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        return json.dumps(log_data)


def _get_level(level: str | int) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, level.upper(), logging.INFO)


def _get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def _clear_handlers() -> None:
    logger = _get_logger()
    for handler in logger.handlers[:]:
        if not isinstance(handler, logging.NullHandler):
            logger.removeHandler(handler)
            handler.close()


def enable_console_logging(
    level: LogLevel | int = "INFO",
    format: str = DEFAULT_FORMAT,
    date_format: str = DEFAULT_DATE_FORMAT,
) -> logging.StreamHandler:
    """Log triage records to stderr.

    Args:
        level: Log level name or number.
        format: Message format string.
        date_format: Format for ``%(asctime)s``.

    Returns:
        The attached handler.
    """
    logger = _get_logger()
    logger.setLevel(_get_level(level))

    handler = logging.StreamHandler()
    handler.setLevel(_get_level(level))
    handler.setFormatter(logging.Formatter(format, date_format))
    logger.addHandler(handler)
    return handler


def enable_file_logging(
    path: str | Path,
    level: LogLevel | int = "INFO",
    max_bytes: int = DEFAULT_MAX_BYTES,
    backup_count: int = DEFAULT_BACKUP_COUNT,
    format: str = DEFAULT_FORMAT,
) -> RotatingFileHandler:
    """Log triage records to a size-rotated file."""
    logger = _get_logger()
    logger.setLevel(_get_level(level))

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    handler = RotatingFileHandler(path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8")
    handler.setLevel(_get_level(level))
    handler.setFormatter(logging.Formatter(format, DEFAULT_DATE_FORMAT))
    logger.addHandler(handler)
    return handler


def enable_json_logging(level: LogLevel | int = "INFO") -> logging.StreamHandler:
    """Log triage records to stderr as JSON lines."""
    logger = _get_logger()
    logger.setLevel(_get_level(level))

    handler = logging.StreamHandler()
    handler.setLevel(_get_level(level))
    handler.setFormatter(JsonFormatter())
    logger.addHandler(handler)
    return handler


def set_level(level: LogLevel | int) -> None:
    _get_logger().setLevel(_get_level(level))


def disable_logging() -> None:
    """Drop every handler added by this module and silence the package again."""
    _clear_handlers()
    logger = _get_logger()
    logger.setLevel(logging.WARNING)
    if not any(isinstance(h, logging.NullHandler) for h in logger.handlers):
        logger.addHandler(logging.NullHandler())


def configure_from_env(
    environ: Optional[Mapping[str, str]] = None,
    default_level: Optional[LogLevel] = None,
) -> bool:
    """Configure logging from ``TRIAGE_*`` environment variables.

    Returns True when any handler was attached. ``default_level`` is used when
    ``TRIAGE_LOGGING`` is unset; with neither, nothing is configured.
    """
    env = os.environ if environ is None else environ
    level = env.get("TRIAGE_LOGGING") or default_level
    if not level:
        return False

    _clear_handlers()
    log_file = env.get("TRIAGE_LOG_FILE")
    if log_file:
        enable_file_logging(log_file, level=level)
    if env.get("TRIAGE_LOG_JSON") == "1":
        enable_json_logging(level=level)
    elif not log_file:
        enable_console_logging(level=level)
    return True
