"""Command module for saved command management and resolution.

This module provides:
- Command: Data model for saved commands
- Placeholder engine: parse_placeholders, substitute_placeholders, ...
- Search: search_commands, sort_commands, score_command
- Validation: validate_id, validate_command_text
- CommandRepository: JSON file repository for command persistence
- CommandExecutor: Executor for resolving saved commands
"""

from comma.core.commands.executor import (
    CommandExecutor,
    ExecutionResult,
    resolve_command,
    resolve_values,
)
from comma.core.commands.models import Command, Placeholder, StoreData, ValidationResult
from comma.core.commands.placeholders import (
    build_initial_values,
    has_placeholders,
    map_args_to_placeholders,
    parse_placeholders,
    substitute_placeholders,
    validate_placeholder_values,
)
from comma.core.commands.repository import (
    CommandRepository,
    ImportResult,
    get_repository,
    reset_repository,
)
from comma.core.commands.search import score_command, search_commands, sort_commands
from comma.core.commands.validation import (
    RESERVED_KEYWORDS,
    validate_command_text,
    validate_id,
)

__all__ = [
    "Command",
    "Placeholder",
    "StoreData",
    "ValidationResult",
    "parse_placeholders",
    "has_placeholders",
    "substitute_placeholders",
    "validate_placeholder_values",
    "build_initial_values",
    "map_args_to_placeholders",
    "search_commands",
    "sort_commands",
    "score_command",
    "RESERVED_KEYWORDS",
    "validate_id",
    "validate_command_text",
    "CommandRepository",
    "ImportResult",
    "get_repository",
    "reset_repository",
    "CommandExecutor",
    "ExecutionResult",
    "resolve_command",
    "resolve_values",
]
