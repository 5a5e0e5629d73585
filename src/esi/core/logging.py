"""
ESI Logging

Every esi module logs through get_logger(__name__). Loggers share one stderr
handler and do not propagate; level and output format come from ESISettings
(ESI_LOG_LEVEL, ESI_DEBUG, ESI_LOG_JSON).

Text records look like `[ESI DEBUG] [client] GET https://...`. JSON output
emits one object per record, including any `extra=` fields.
"""

import json
import logging
import sys
import traceback
from datetime import datetime, timezone
from typing import Any, Optional

from .config import get_settings

# LogRecord attributes that are not user-supplied extras
_RECORD_ATTRS = frozenset(
    {
        "name",
        "msg",
        "args",
        "levelname",
        "levelno",
        "pathname",
        "filename",
        "module",
        "lineno",
        "funcName",
        "created",
        "msecs",
        "relativeCreated",
        "thread",
        "threadName",
        "processName",
        "process",
        "taskName",
        "exc_info",
        "exc_text",
        "stack_info",
        "message",
    }
)


def _get_log_level() -> int:
    return get_settings().log_level_int


def _is_json_output() -> bool:
    return get_settings().log_json


class ESIFormatter(logging.Formatter):
    """
    Formats records as `[ESI LEVEL] [module] message`, or as one JSON
    object per line when JSON output is enabled.
    """

    def __init__(self, json_output: bool = False) -> None:
        super().__init__()
        self.json_output = json_output

    def format(self, record: logging.LogRecord) -> str:
        if self.json_output:
            return self._format_json(record)
        return self._format_text(record)

    def _format_text(self, record: logging.LogRecord) -> str:
        module = record.name.split(".")[-1]
        msg = f"[ESI {record.levelname}] [{module}] {record.getMessage()}"

        if record.exc_info:
            msg += "\n" + "".join(traceback.format_exception(*record.exc_info))

        return msg

    def _format_json(self, record: logging.LogRecord) -> str:
        log_data: dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat(timespec="seconds"),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        for key, value in record.__dict__.items():
            if key not in _RECORD_ATTRS:
                log_data[key] = value

        if record.exc_info:
            log_data["exception"] = "".join(traceback.format_exception(*record.exc_info))

        return json.dumps(log_data, default=str)


_loggers: dict[str, logging.Logger] = {}
_handler: Optional[logging.Handler] = None


def _get_handler() -> logging.Handler:
    """Get or create the shared stderr handler."""
    global _handler
    if _handler is None:
        _handler = logging.StreamHandler(sys.stderr)
        _handler.setFormatter(ESIFormatter(json_output=_is_json_output()))
    return _handler


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger for the given module name.

    Args:
        name: Module name (typically __name__)

    Returns:
        Configured logger instance
    """
    if name in _loggers:
        return _loggers[name]

    logger = logging.getLogger(name)
    logger.setLevel(_get_log_level())
    logger.addHandler(_get_handler())
    logger.propagate = False

    _loggers[name] = logger
    return logger


def set_log_level(level: int) -> None:
    """
    Dynamically set log level for all ESI loggers.

    Args:
        level: logging.DEBUG, logging.INFO, etc.
    """
    for logger in _loggers.values():
        logger.setLevel(level)


def debug_enabled() -> bool:
    """Check if debug logging is enabled."""
    return _get_log_level() <= logging.DEBUG


def reset_logging() -> None:
    """
    Reset all ESI loggers to default state.

    Restores propagate=True and level=NOTSET on every esi.* logger and drops
    the shared handler, so caplog can capture records in tests.
    """
    global _handler

    manager = logging.Logger.manager
    for name in list(manager.loggerDict.keys()):
        if name == "esi" or name.startswith("esi."):
            logger_or_placeholder = manager.loggerDict[name]
            if isinstance(logger_or_placeholder, logging.Logger):
                logger_or_placeholder.propagate = True
                logger_or_placeholder.setLevel(logging.NOTSET)

    for logger in _loggers.values():
        if _handler is not None:
            logger.removeHandler(_handler)

    _handler = None
