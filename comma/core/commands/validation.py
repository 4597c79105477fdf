# comma/core/commands/validation.py
"""Validation rules for command IDs and command text."""

import re
from dataclasses import dataclass

MAX_ID_LENGTH = 50
MAX_COMMAND_LENGTH = 2000

# Subcommand names that cannot be used as command IDs
RESERVED_KEYWORDS: tuple[str, ...] = (
    "add",
    "edit",
    "delete",
    "rm",
    "list",
    "ls",
    "search",
    "fav",
    "favorite",
    "favorites",
    "favs",
    "info",
    "export",
    "import",
    "setup",
    "init",
    "run",
    "help",
)

# Lowercase alphanumeric segments joined by single hyphens: "dev", "test-123"
ID_PATTERN = re.compile(r"[a-z0-9]+(?:-[a-z0-9]+)*")


@dataclass
class CheckResult:
    """Result of a single validation check.

    Attributes:
        valid: Whether the value passed.
        error: Human readable reason when it did not.
    """

    valid: bool
    error: str | None = None


def validate_id(command_id: str) -> CheckResult:
    """Validate a command ID.

    Args:
        command_id: Candidate ID.

    Returns:
        CheckResult describing the first rule that failed, if any.

    Examples:
        >>> validate_id("my-command").valid
        True

        >>> validate_id("list").error
        "'list' is a reserved keyword and cannot be used as a command ID"
    """
    if not command_id:
        return CheckResult(False, "ID is required")

    if len(command_id) > MAX_ID_LENGTH:
        return CheckResult(False, f"ID must be {MAX_ID_LENGTH} characters or less")

    if is_reserved_keyword(command_id):
        return CheckResult(
            False,
            f"'{command_id}' is a reserved keyword and cannot be used as a command ID",
        )

    if not ID_PATTERN.fullmatch(command_id):
        return CheckResult(
            False,
            "ID must be lowercase alphanumeric with hyphens "
            "(e.g., 'my-command', 'test-123')",
        )

    return CheckResult(True)


def validate_command_text(command: str) -> CheckResult:
    """Validate a command template string."""
    if not command:
        return CheckResult(False, "Command is required")

    if len(command) > MAX_COMMAND_LENGTH:
        return CheckResult(
            False, f"Command must be {MAX_COMMAND_LENGTH} characters or less"
        )

    return CheckResult(True)


def normalize_id(command_id: str) -> str:
    """Normalize a potential ID (lowercase, trimmed)."""
    return command_id.lower().strip()


def looks_like_id(text: str) -> bool:
    """Check if a string has the shape of a command ID."""
    return ID_PATTERN.fullmatch(text.lower()) is not None


def is_reserved_keyword(text: str) -> bool:
    """Check if a string is a reserved subcommand name."""
    return text in RESERVED_KEYWORDS
