# comma/interfaces/cli/formatters.py
"""Output formatting for the command line interface.

Tables and info blocks are rich renderables; JSON and exec output are
plain strings so they can be piped or evaluated by the shell.
"""

import json
from collections.abc import Sequence

from rich.table import Table
from rich.text import Text

from comma.core.commands.models import Command

MAX_COMMAND_WIDTH = 50
RULE = "─" * 37


def truncate(text: str, max_length: int, suffix: str = "...") -> str:
    """Truncate text to max_length characters, marking the cut with suffix."""
    if len(text) <= max_length:
        return text
    return text[: max_length - len(suffix)] + suffix


def format_summary(commands: Sequence[Command]) -> str:
    """Footer line such as '3 commands, 1 favorite'."""
    count = len(commands)
    favorites = sum(1 for cmd in commands if cmd.favorite)

    summary = f"{count} command{'s' if count != 1 else ''}"
    if favorites:
        summary += f", {favorites} favorite{'s' if favorites != 1 else ''}"
    return summary


def build_command_table(commands: Sequence[Command], numbered: bool = False) -> Table:
    """Build a rich table of commands.

    Args:
        commands: Commands in display order.
        numbered: Prepend a 1-based row number column (interactive mode).

    Returns:
        Table with ID, Command, Fav and Uses columns.
    """
    table = Table(show_lines=False, box=None, pad_edge=False, header_style="bold")
    if numbered:
        table.add_column("#", justify="right", style="dim")
    table.add_column("ID", style="cyan", no_wrap=True)
    table.add_column("Command", overflow="ellipsis")
    table.add_column("Fav", justify="center")
    table.add_column("Uses", justify="right")

    for position, cmd in enumerate(commands, start=1):
        row = [
            Text(cmd.id),
            Text(truncate(cmd.command, MAX_COMMAND_WIDTH)),
            "*" if cmd.favorite else "",
            str(cmd.usage_count),
        ]
        if numbered:
            row.insert(0, str(position))
        table.add_row(*row)

    return table


def format_command_json(commands: Sequence[Command]) -> str:
    """Format a list of commands as indented JSON."""
    return json.dumps([cmd.to_dict() for cmd in commands], indent=2, ensure_ascii=False)


def format_command_info(command: Command) -> str:
    """Format a single command's details."""
    lines = [
        f"ID:          {command.id}",
        f"Command:     {command.command}",
    ]

    if command.description:
        lines.append(f"Description: {command.description}")

    lines.append(f"Favorite:    {'Yes' if command.favorite else 'No'}")
    lines.append(f"Usage Count: {command.usage_count}")

    if command.last_used:
        lines.append(f"Last Used:   {command.last_used.astimezone():%Y-%m-%d %H:%M:%S}")

    lines.append(f"Created:     {command.created_at.astimezone():%Y-%m-%d %H:%M:%S}")
    lines.append(f"Updated:     {command.updated_at.astimezone():%Y-%m-%d %H:%M:%S}")

    return "\n".join(lines)


def format_no_shell_integration(command_id: str, resolved_command: str) -> str:
    """Notice shown when a command is run without the shell wrapper."""
    return "\n".join(
        [
            "Shell integration not detected!",
            "",
            "Setup required to run commands in your current shell.",
            "Run: comma setup",
            "",
            RULE,
            "Command to execute:",
            f"  {resolved_command}",
            "",
            "For now, you can run manually:",
            f'  eval "$(comma --raw {command_id})"',
            RULE,
        ]
    )


def format_selected_command(command_id: str, resolved_command: str, integrated: bool) -> str:
    """Message printed after picking a command in interactive mode."""
    lines = [
        "",
        RULE,
        f"Command: {command_id}",
        f"Execute: {resolved_command}",
        RULE,
        "",
    ]
    if integrated:
        lines += ["Run this command directly:", f"  comma {command_id}"]
    else:
        lines += [
            "To run this command in your shell:",
            f'  eval "$(comma --raw {command_id})"',
            "",
            "Or run 'comma setup' to enable automatic execution.",
        ]
    return "\n".join(lines)


def format_version(version: str) -> str:
    """Format version string."""
    return f"comma v{version}"
