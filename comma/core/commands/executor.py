# comma/core/commands/executor.py
"""Command executor for resolving saved commands.

This module provides the CommandExecutor class which handles command
lookup and placeholder resolution. It never runs anything itself: the
resolved text is handed to the user's shell by the wrapper function.
"""

import logging
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

from comma.core.commands.models import Command
from comma.core.commands.placeholders import (
    map_args_to_placeholders,
    parse_placeholders,
    substitute_placeholders,
    validate_placeholder_values,
)
from comma.core.commands.repository import CommandRepository

logger = logging.getLogger(__name__)


@dataclass
class ExecutionResult:
    """Result of preparing a command for execution.

    Attributes:
        success: Whether the command could be fully resolved.
        command: The resolved command ready to execute.
        error: Error message if success is False.
        missing: Names of required placeholders that had no value.
    """

    success: bool
    command: str | None = None
    error: str | None = None
    missing: list[str] = field(default_factory=list)


def format_missing(missing: Sequence[str]) -> str:
    """Format the error message for missing required placeholders."""
    plural = "s" if len(missing) > 1 else ""
    return f"Missing required placeholder{plural}: {', '.join(missing)}"


def resolve_values(command: Command, values: Mapping[str, str]) -> ExecutionResult:
    """Resolve a command template against named placeholder values.

    Args:
        command: Saved command to resolve.
        values: Mapping of placeholder name to value.

    Returns:
        ExecutionResult with the substituted command, or the missing names.
    """
    placeholders = parse_placeholders(command.command)
    if not placeholders:
        return ExecutionResult(success=True, command=command.command)

    validation = validate_placeholder_values(placeholders, values)
    if not validation.valid:
        return ExecutionResult(
            success=False, error=format_missing(validation.missing), missing=validation.missing
        )

    return ExecutionResult(success=True, command=substitute_placeholders(command.command, values))


def resolve_command(command: Command, args: Sequence[str]) -> ExecutionResult:
    """Resolve a command template against positional arguments.

    Arguments are bound to placeholders in order of first appearance.

    Example:
        >>> cmd = Command(id="deploy", command="git push {remote:origin} {branch:main}")
        >>> resolve_command(cmd, ["upstream"]).command
        'git push upstream main'
    """
    values = map_args_to_placeholders(parse_placeholders(command.command), args)
    return resolve_values(command, values)


class CommandExecutor:
    """Executor for preparing saved commands.

    The CommandExecutor looks up commands from the repository, resolves
    their placeholders and records usage once a command is handed off.

    Attributes:
        repository: CommandRepository for command lookup.

    Example:
        >>> executor = CommandExecutor(repository=get_repository())
        >>> result = executor.prepare("deploy", ["origin", "feature"])
        >>> if result.success:
        ...     print(result.command)
    """

    def __init__(self, repository: CommandRepository) -> None:
        """Initialize the CommandExecutor.

        Args:
            repository: CommandRepository for command lookup.
        """
        self.repository = repository

    def prepare(self, command_id: str, args: Sequence[str]) -> ExecutionResult:
        """Look up a command and resolve it with positional arguments.

        Args:
            command_id: ID of the saved command.
            args: Positional placeholder arguments.

        Returns:
            ExecutionResult; an unknown ID yields success=False.
        """
        command = self.repository.get(command_id)
        if command is None:
            return ExecutionResult(success=False, error=f"Command '{command_id}' not found")

        result = resolve_command(command, args)
        if not result.success:
            logger.debug("Command %s is missing %s", command_id, result.missing)
        return result

    def record(self, command_id: str) -> None:
        """Record that a command was handed to the shell."""
        self.repository.record_usage(command_id)
