"""
Unit Tests for Centralized Logging.

Tests handler setup: stdout must stay free of log output.
"""

import json
import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path

import pytest

from sprout_track.core.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
    for handler in handlers:
        root.addHandler(handler)
    root.setLevel(level)


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_default_level_from_settings(self) -> None:
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_level_override(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger().level == logging.DEBUG

    def test_console_handler_writes_to_stderr(self) -> None:
        setup_logging()

        handlers = logging.getLogger().handlers
        assert len(handlers) == 1
        assert handlers[0].stream is sys.stderr

    def test_repeated_setup_does_not_duplicate_handlers(self) -> None:
        setup_logging()
        setup_logging()
        assert len(logging.getLogger().handlers) == 1

    def test_file_handler_writes_json_lines(self, tmp_path: Path) -> None:
        log_file = tmp_path / "logs" / "cli.jsonl"
        setup_logging(level="INFO", log_file=log_file)

        get_logger("sprout_track.test").info("Session started", kind="sleep")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert any(isinstance(h, RotatingFileHandler) for h in logging.getLogger().handlers)
        record = json.loads(log_file.read_text().splitlines()[-1])
        assert record["event"] == "Session started"
        assert record["kind"] == "sleep"
        assert record["level"] == "info"

    def test_http_libraries_are_quieted(self) -> None:
        setup_logging(level="DEBUG")
        assert logging.getLogger("httpx").level == logging.WARNING
