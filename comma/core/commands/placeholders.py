# comma/core/commands/placeholders.py
"""Pure function-based placeholder engine for command templates.

Placeholders are written as ``{name}`` (required) or ``{name:default}``
(optional, the default may be empty). A brace preceded by a backslash is
literal text: ``\\{name}`` is never a placeholder, and ``\\{`` / ``\\}`` are
unescaped to ``{`` / ``}`` when a template is substituted.

All scanning goes through ``finditer``/``search``/``sub`` on a compiled
pattern, which carry no position state between calls.
"""

import re
from collections.abc import Mapping, Sequence

from comma.core.commands.models import Placeholder, ValidationResult

# Group 1: name, group 2: default value (None when there is no ':' part)
PLACEHOLDER_PATTERN = re.compile(r"(?<!\\)\{([a-zA-Z_][a-zA-Z0-9_-]*)(?::([^}]*))?\}")

ESCAPED_BRACE_PATTERN = re.compile(r"\\([{}])")


def parse_placeholders(template: str) -> list[Placeholder]:
    """Parse placeholders from a command template.

    Matches are returned in order of appearance. When a name occurs more
    than once, only its first occurrence becomes a placeholder; later
    occurrences are ignored here but still substituted by
    substitute_placeholders.

    Args:
        template: The command template to scan.

    Returns:
        Ordered list of unique placeholders, empty when there are none.

    Examples:
        >>> [p.name for p in parse_placeholders("git push {remote:origin} {branch:main}")]
        ['remote', 'branch']

        >>> parse_placeholders("echo Hello, {name}!")[0].required
        True

        >>> parse_placeholders("echo \\\\{literal}")
        []
    """
    placeholders: list[Placeholder] = []
    seen: set[str] = set()

    for match in PLACEHOLDER_PATTERN.finditer(template):
        name = match.group(1)
        if name in seen:
            continue
        seen.add(name)

        placeholders.append(
            Placeholder(name=name, default_value=match.group(2), match=match.group(0))
        )

    return placeholders


def has_placeholders(template: str) -> bool:
    """Check if a template contains at least one placeholder."""
    return PLACEHOLDER_PATTERN.search(template) is not None


def substitute_placeholders(template: str, values: Mapping[str, str]) -> str:
    """Substitute placeholders in a template with provided values.

    Every occurrence is replaced, including repeated names. For each
    occurrence the first applicable rule wins:

    1. a non-empty value from ``values``;
    2. the declared default, which may be empty;
    3. the original placeholder text, left untouched.

    Escaped braces are unescaped afterwards.

    Args:
        template: The command template.
        values: Mapping of placeholder name to value.

    Returns:
        The resolved command string.

    Examples:
        >>> substitute_placeholders("git push {remote:origin} {branch:main}", {})
        'git push origin main'

        >>> substitute_placeholders("{a} and {a}", {"a": "x"})
        'x and x'
    """

    def replace(match: re.Match) -> str:
        name, default_value = match.group(1), match.group(2)
        value = values.get(name)
        if value:
            return value
        if default_value is not None:
            return default_value
        # Unresolved required slot; callers validate before substituting
        return match.group(0)

    result = PLACEHOLDER_PATTERN.sub(replace, template)
    return ESCAPED_BRACE_PATTERN.sub(r"\1", result)


def validate_placeholder_values(
    placeholders: Sequence[Placeholder], values: Mapping[str, str]
) -> ValidationResult:
    """Validate that all required placeholders have values.

    An empty string counts as not provided.

    Args:
        placeholders: Placeholders parsed from a template.
        values: Mapping of placeholder name to value.

    Returns:
        ValidationResult with the missing names in slot order.
    """
    missing = [
        ph.name for ph in placeholders if ph.required and not values.get(ph.name)
    ]
    return ValidationResult(valid=not missing, missing=missing)


def build_initial_values(placeholders: Sequence[Placeholder]) -> dict[str, str]:
    """Build initial values from placeholders, using defaults where declared."""
    return {
        ph.name: ph.default_value if ph.default_value is not None else ""
        for ph in placeholders
    }


def map_args_to_placeholders(
    placeholders: Sequence[Placeholder], args: Sequence[str]
) -> dict[str, str]:
    """Map positional arguments to placeholders in slot order.

    Arguments overwrite defaults unconditionally, an empty string
    included. Extra arguments are ignored and missing ones leave the
    slot at its default (or empty string).

    Args:
        placeholders: Placeholders parsed from a template.
        args: Positional arguments from the command line.

    Returns:
        Mapping of placeholder name to value.

    Examples:
        >>> phs = parse_placeholders("git push {remote:origin} {branch:main}")
        >>> map_args_to_placeholders(phs, ["upstream"])
        {'remote': 'upstream', 'branch': 'main'}
    """
    values = build_initial_values(placeholders)

    for placeholder, arg in zip(placeholders, args):
        values[placeholder.name] = arg

    return values
