# comma/utils/logging.py
"""Logging setup with optional JSON format and command ID correlation.

Provides:
- JSON-formatted log output for structured logging
- Command ID correlation via ContextVar
- Extra fields from logging calls carried into the JSON output
- Centralized logger configuration writing to stderr

Stdout is reserved for command output consumed by the shell wrapper,
so every handler installed here writes to stderr.
"""

import json
import logging
import sys
from contextvars import ContextVar
from typing import Any

# ID of the saved command currently being handled
command_id_var: ContextVar[str] = ContextVar("command_id", default="")

PLAIN_FORMAT = "%(levelname)s %(name)s: %(message)s"


def set_command_id(command_id: str) -> None:
    """Set the command ID for the current context.

    Args:
        command_id: ID of the saved command being handled.
    """
    command_id_var.set(command_id)


def get_command_id() -> str:
    """Get the command ID for the current context.

    Returns:
        Current command ID, or empty string if not set.
    """
    return command_id_var.get()


# Attributes every LogRecord carries; anything else came in through ``extra``
RECORD_ATTRS = frozenset(
    vars(logging.LogRecord("", logging.NOTSET, "", 0, "", None, None))
) | {"message", "asctime", "taskName"}


def record_extras(record: logging.LogRecord) -> dict[str, Any]:
    """Collect fields passed to a logging call through ``extra``."""
    return {
        key: value
        for key, value in sorted(vars(record).items())
        if key not in RECORD_ATTRS and not key.startswith("_")
    }


class StructuredFormatter(logging.Formatter):
    """JSON formatter for structured logging.

    Outputs one JSON object per record. The fixed keys come first in a
    stable order (timestamp, level, logger, message, command_id), followed
    by any ``extra`` fields sorted by name and the exception last. Values
    that are not JSON types, such as paths, are rendered with ``str``.

    Example:
        logger.debug("Saved store", extra={"path": path, "count": 3}) renders as
        {"timestamp": "...", "level": "DEBUG", ..., "count": 3, "path": "/..."}
    """

    def format(self, record: logging.LogRecord) -> str:
        """Format a log record as JSON.

        Args:
            record: Log record to format.

        Returns:
            JSON-formatted log string.
        """
        log_data: dict[str, Any] = {
            "timestamp": self.formatTime(record),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        command_id = getattr(record, "command_id", None) or get_command_id()
        if command_id:
            log_data["command_id"] = command_id

        for key, value in record_extras(record).items():
            log_data.setdefault(key, value)

        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_data, default=str)


def configure_logging(level: int | str = logging.WARNING, json_format: bool = False) -> None:
    """Configure logging for the command line application.

    Sets up a stderr StreamHandler on the root logger, replacing any
    handler installed by a previous call.

    Args:
        level: Logging level name or number (default: logging.WARNING).
        json_format: Emit JSON lines via StructuredFormatter when True.
    """
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.WARNING

    handler = logging.StreamHandler(sys.stderr)
    if json_format:
        handler.setFormatter(StructuredFormatter())
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    for existing in list(logging.root.handlers):
        if getattr(existing, "_comma_handler", False):
            logging.root.removeHandler(existing)

    handler._comma_handler = True  # type: ignore[attr-defined]
    logging.root.addHandler(handler)
    logging.root.setLevel(level)
