"""Tests for logging setup"""

import json
import logging

import pytest
import structlog
from structlog.testing import capture_logs

from core.logconfig import configure_logging, get_logger


@pytest.fixture
def restore_logging():
    root = logging.getLogger()
    level = root.level
    handlers = list(root.handlers)
    yield
    structlog.reset_defaults()
    root.setLevel(level)
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)


class TestGetLogger:
    """Test calculator loggers"""

    def test_events_carry_subsystem(self):
        with capture_logs() as logs:
            get_logger("tests.logconfig").info("hello", answer=42)
        assert logs == [
            {"event": "hello", "answer": 42, "subsystem": "calculator", "log_level": "info"}
        ]


class TestConfigureLogging:
    """Test structlog configuration"""

    def test_json_output(self, caplog, restore_logging):
        configure_logging(level="DEBUG", format_json=True, include_timestamp=False)
        get_logger("tests.logconfig.json").warning("capped", cap=10)

        payload = json.loads(caplog.records[-1].getMessage())
        assert payload["event"] == "capped"
        assert payload["cap"] == 10
        assert payload["level"] == "warning"
        assert payload["logger"] == "tests.logconfig.json"
        assert payload["subsystem"] == "calculator"

    def test_console_renderer_by_default(self, restore_logging):
        configure_logging()
        renderer = structlog.get_config()["processors"][-1]
        assert isinstance(renderer, structlog.dev.ConsoleRenderer)

    def test_level_filters_debug(self, caplog, restore_logging):
        configure_logging(level="WARNING", format_json=True, include_timestamp=False)
        get_logger("tests.logconfig.level").debug("noise")
        assert "noise" not in caplog.text
