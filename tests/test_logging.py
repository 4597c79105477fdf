"""Tests for logging configuration and settings."""

import json
import logging
import sys
from pathlib import Path

import pytest

from comma.config import Settings
from comma.utils.logging import (
    StructuredFormatter,
    configure_logging,
    get_command_id,
    set_command_id,
)


@pytest.fixture
def restore_root_logger():
    """Restore root logger handlers and level after the test."""
    handlers = list(logging.root.handlers)
    level = logging.root.level
    yield
    logging.root.handlers[:] = handlers
    logging.root.setLevel(level)


class TestStructuredFormatter:
    """Test suite for StructuredFormatter."""

    def _record(self, message: str) -> logging.LogRecord:
        return logging.LogRecord("comma.test", logging.INFO, __file__, 1, message, None, None)

    def test_format_json(self) -> None:
        """Test that records are rendered as JSON."""
        set_command_id("")
        data = json.loads(StructuredFormatter().format(self._record("hello")))

        assert data["level"] == "INFO"
        assert data["logger"] == "comma.test"
        assert data["message"] == "hello"
        assert "command_id" not in data

    def test_format_includes_command_id(self) -> None:
        """Test that the current command ID is attached."""
        set_command_id("deploy")
        try:
            data = json.loads(StructuredFormatter().format(self._record("run")))
            assert data["command_id"] == "deploy"
            assert get_command_id() == "deploy"
        finally:
            set_command_id("")

    def test_format_includes_extra_fields(self, tmp_path: Path) -> None:
        """Test that extra fields follow the fixed keys in sorted order."""
        set_command_id("")
        record = self._record("saved")
        record.store = tmp_path / "commands.json"
        record.count = 3

        data = json.loads(StructuredFormatter().format(record))

        assert list(data) == ["timestamp", "level", "logger", "message", "count", "store"]
        assert data["store"] == str(tmp_path / "commands.json")
        assert data["count"] == 3

    def test_extra_from_logging_call(self, caplog) -> None:
        """Test extras passed through a logger call end up in the JSON."""
        set_command_id("")
        with caplog.at_level(logging.DEBUG, logger="comma.test"):
            logging.getLogger("comma.test").debug("resolved", extra={"arg_count": 2})

        data = json.loads(StructuredFormatter().format(caplog.records[-1]))

        assert data["arg_count"] == 2
        assert "args" not in data

    def test_exception_is_last(self) -> None:
        """Test that exception text comes after extra fields."""
        set_command_id("")
        try:
            raise OSError("disk full")
        except OSError:
            record = logging.LogRecord(
                "comma.test", logging.ERROR, __file__, 1, "failed", None, sys.exc_info()
            )
        record.store = "commands.json"

        data = json.loads(StructuredFormatter().format(record))

        assert list(data)[-1] == "exception"
        assert "disk full" in data["exception"]


class TestConfigureLogging:
    """Test suite for configure_logging."""

    def test_configure_replaces_handler(self, restore_root_logger) -> None:
        """Test that repeated calls keep a single comma handler."""
        configure_logging("DEBUG")
        configure_logging("INFO", json_format=True)

        ours = [h for h in logging.root.handlers if getattr(h, "_comma_handler", False)]
        assert len(ours) == 1
        assert isinstance(ours[0].formatter, StructuredFormatter)
        assert logging.root.level == logging.INFO

    def test_configure_unknown_level(self, restore_root_logger) -> None:
        """Test that an unknown level name falls back to WARNING."""
        configure_logging("chatty")
        assert logging.root.level == logging.WARNING


class TestSettings:
    """Test suite for Settings."""

    def test_defaults(self, monkeypatch) -> None:
        """Test default values."""
        monkeypatch.delenv("COMMA_CONFIG_DIR", raising=False)
        monkeypatch.delenv("COMMA_SEARCH_THRESHOLD", raising=False)
        settings = Settings(_env_file=None)

        assert settings.search_threshold == 60.0
        assert settings.commands_file.name == "commands.json"

    def test_environment_overrides(self, monkeypatch, tmp_path: Path) -> None:
        """Test that COMMA_ variables override defaults."""
        monkeypatch.setenv("COMMA_CONFIG_DIR", str(tmp_path))
        monkeypatch.setenv("COMMA_SEARCH_THRESHOLD", "75")
        settings = Settings(_env_file=None)

        assert settings.commands_file == tmp_path / "commands.json"
        assert settings.search_threshold == 75.0
