# comma/core/commands/search.py
"""Fuzzy search and ordering over saved commands.

Matching uses RapidFuzz similarity scores per field. The ID field weighs
most, then the command text, then the description. A command matches when
any field scores at or above the cutoff. The relevance score only decides
membership: results are always presented in sort_commands order so that
favorites and frequently used commands stay on top.
"""

from collections.abc import Iterable, Sequence

from rapidfuzz import fuzz

from comma.config import settings
from comma.core.commands.models import Command

FIELD_WEIGHTS: dict[str, float] = {
    "id": 2.0,
    "command": 1.0,
    "description": 0.5,
}

TOTAL_WEIGHT = sum(FIELD_WEIGHTS.values())


def _field_score(query: str, text: str) -> float:
    """Score how well a lowercased query matches a field (0-100).

    Queries no longer than the field are aligned against its best matching
    window, so a match anywhere in the field counts the same. Longer
    queries are compared against the whole field.
    """
    text = text.lower()
    if len(query) <= len(text):
        return fuzz.partial_ratio(query, text)
    return fuzz.ratio(query, text)


def _field_values(command: Command) -> Iterable[tuple[str, str]]:
    yield "id", command.id
    yield "command", command.command
    if command.description:
        yield "description", command.description


def score_command(
    command: Command, query: str, threshold: float | None = None
) -> float | None:
    """Compute the weighted relevance of a command for a query.

    Args:
        command: Command to score.
        query: Free-text search query.
        threshold: Per-field cutoff (0-100). Defaults to settings.search_threshold.

    Returns:
        Relevance between 0 and 100, or None when no field matches.
    """
    if threshold is None:
        threshold = settings.search_threshold

    needle = query.strip().lower()
    if not needle:
        return None

    weighted = 0.0
    matched = False
    for name, text in _field_values(command):
        score = _field_score(needle, text)
        if score >= threshold:
            matched = True
            weighted += FIELD_WEIGHTS[name] * score

    if not matched:
        return None
    return weighted / TOTAL_WEIGHT


def sort_commands(commands: Iterable[Command]) -> list[Command]:
    """Sort commands: favorites first, then by usage count, then by ID.

    Args:
        commands: Commands in any order.

    Returns:
        A new list; the input is left untouched.
    """
    return sorted(commands, key=lambda c: (not c.favorite, -c.usage_count, c.id))


def search_commands(
    commands: Sequence[Command], query: str, threshold: float | None = None
) -> list[Command]:
    """Search commands with fuzzy matching.

    An empty (or whitespace-only) query returns every command in
    sort_commands order.

    Args:
        commands: Commands to search.
        query: Free-text search query.
        threshold: Per-field cutoff (0-100). Defaults to settings.search_threshold.

    Returns:
        Matching commands in sort_commands order.

    Examples:
        >>> search_commands([], "anything")
        []
    """
    if not query.strip():
        return sort_commands(commands)

    matched = [cmd for cmd in commands if score_command(cmd, query, threshold) is not None]
    return sort_commands(matched)
