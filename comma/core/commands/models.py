# comma/core/commands/models.py
"""Data models for saved commands and their placeholders.

This module defines the Command dataclass which represents a saved shell
command with its template and usage metadata, plus the transient value
objects produced by the placeholder engine.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone

STORE_VERSION = "1.0"


def to_millis(value: datetime) -> int:
    """Convert a datetime to Unix epoch milliseconds."""
    return int(round(value.timestamp() * 1000))


def from_millis(value: int | float) -> datetime:
    """Convert Unix epoch milliseconds to an aware UTC datetime."""
    return datetime.fromtimestamp(value / 1000, tz=timezone.utc)


def utc_now() -> datetime:
    """Current time as an aware UTC datetime truncated to milliseconds."""
    return from_millis(to_millis(datetime.now(timezone.utc)))


@dataclass
class Command:
    """Represents a saved command with its template string.

    A command stores a reusable shell command that users can invoke
    by ID. Commands track how often and when they were last used.

    Attributes:
        id: Unique identifier (lowercase alphanumeric segments joined by hyphens).
        command: The command template, optionally containing placeholders.
        description: Optional free-text description.
        favorite: Whether the command is pinned as a favorite.
        created_at: Timestamp when the command was created.
        updated_at: Timestamp when the command was last updated.
        usage_count: Number of times the command has been executed.
        last_used: Timestamp of the last execution, if any.

    Example:
        >>> cmd = Command(id="deploy", command="git push {remote:origin} {branch:main}")
        >>> cmd.favorite
        False
    """

    id: str
    command: str
    description: str | None = None
    favorite: bool = False
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)
    usage_count: int = 0
    last_used: datetime | None = None

    def to_dict(self) -> dict:
        """Convert to the on-disk dictionary layout.

        Keys are camelCase and timestamps are epoch milliseconds. Optional
        fields are omitted when unset.

        Returns:
            Dictionary representation of the command.
        """
        data: dict = {"id": self.id, "command": self.command}
        if self.description is not None:
            data["description"] = self.description
        data["favorite"] = self.favorite
        data["createdAt"] = to_millis(self.created_at)
        data["updatedAt"] = to_millis(self.updated_at)
        data["usageCount"] = self.usage_count
        if self.last_used is not None:
            data["lastUsed"] = to_millis(self.last_used)
        return data


@dataclass
class StoreData:
    """Root structure of the commands file.

    Attributes:
        version: Schema version for migrations.
        commands: Saved commands in file order.
    """

    version: str = STORE_VERSION
    commands: list[Command] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Convert to a JSON-serializable dictionary."""
        return {
            "version": self.version,
            "commands": [cmd.to_dict() for cmd in self.commands],
        }


@dataclass(frozen=True)
class Placeholder:
    """A named slot parsed from a command template.

    Attributes:
        name: Placeholder name.
        default_value: Default text, or None when the slot is required.
        match: The full matched text including braces.
    """

    name: str
    default_value: str | None
    match: str

    @property
    def required(self) -> bool:
        """Whether a value must be supplied (no default declared)."""
        return self.default_value is None


@dataclass
class ValidationResult:
    """Outcome of checking placeholder values.

    Attributes:
        valid: True when no required placeholder is missing.
        missing: Names of missing required placeholders in slot order.
    """

    valid: bool
    missing: list[str] = field(default_factory=list)
