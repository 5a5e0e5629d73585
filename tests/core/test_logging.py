"""
Tests for ESI Structured Logging.

Tests logger configuration, formatters, and utility functions.
"""

from __future__ import annotations

import json
import logging
import sys

from esi.core.logging import (
    ESIFormatter,
    debug_enabled,
    get_logger,
    reset_logging,
    set_log_level,
)


def make_record(
    name: str = "esi.core.client", level: int = logging.INFO, **extra
) -> logging.LogRecord:
    record = logging.LogRecord(
        name=name,
        level=level,
        pathname="client.py",
        lineno=10,
        msg="GET %s",
        args=("/wars/",),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class TestESIFormatter:
    """Test ESIFormatter class."""

    def test_text_format_basic(self):
        formatted = ESIFormatter(json_output=False).format(make_record())

        assert formatted == "[ESI INFO] [client] GET /wars/"

    def test_text_format_with_exception(self):
        try:
            raise ValueError("Test error")
        except ValueError:
            exc_info = sys.exc_info()

        record = make_record(level=logging.ERROR)
        record.exc_info = exc_info

        formatted = ESIFormatter().format(record)

        assert "ValueError" in formatted
        assert "Test error" in formatted

    def test_json_format_basic(self):
        formatted = ESIFormatter(json_output=True).format(make_record())

        data = json.loads(formatted)
        assert data["level"] == "INFO"
        assert data["logger"] == "esi.core.client"
        assert data["message"] == "GET /wars/"
        assert "timestamp" in data

    def test_json_format_includes_extras(self):
        formatted = ESIFormatter(json_output=True).format(make_record(endpoint="/wars/"))

        assert json.loads(formatted)["endpoint"] == "/wars/"


class TestGetLogger:
    """Test logger factory."""

    def test_cached(self):
        assert get_logger("esi.test.cached") is get_logger("esi.test.cached")

    def test_configured(self):
        reset_logging()
        logger = get_logger("esi.test.configured")

        assert logger.propagate is False
        assert logger.level == logging.WARNING
        assert any(isinstance(h.formatter, ESIFormatter) for h in logger.handlers)

    def test_set_log_level(self):
        logger = get_logger("esi.test.level")

        set_log_level(logging.ERROR)

        assert logger.level == logging.ERROR

    def test_debug_enabled_follows_settings(self, monkeypatch):
        from esi.core.config import reset_settings

        assert debug_enabled() is False
        monkeypatch.setenv("ESI_DEBUG", "1")
        reset_settings()
        assert debug_enabled() is True


class TestResetLogging:
    """Test reset for test isolation."""

    def test_restores_propagation(self):
        logger = get_logger("esi.test.reset")
        assert logger.propagate is False

        reset_logging()

        assert logger.propagate is True
        assert logger.level == logging.NOTSET

    def test_leaves_foreign_loggers_alone(self):
        foreign = logging.getLogger("esimilar.thing")
        foreign.propagate = False

        reset_logging()

        assert foreign.propagate is False
        foreign.propagate = True
