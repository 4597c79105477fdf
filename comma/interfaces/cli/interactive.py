# comma/interfaces/cli/interactive.py
"""Interactive command browser built on rich prompts.

The browser lists saved commands, narrows them down with fuzzy search and
lets the user add, edit, delete and favorite commands. Picking a command
asks for any placeholder values before handing the resolved command back
to the CLI.
"""

import logging
import re
from typing import IO

from rich.console import Console
from rich.markup import escape
from rich.prompt import Confirm, Prompt

from comma.core.commands.executor import resolve_values
from comma.core.commands.models import Command
from comma.core.commands.placeholders import build_initial_values, parse_placeholders
from comma.core.commands.repository import CommandRepository
from comma.core.commands.search import search_commands
from comma.core.commands.validation import validate_command_text, validate_id
from comma.interfaces.cli.formatters import build_command_table, format_summary

logger = logging.getLogger(__name__)

PAGE_SIZE = 20
MAX_ATTEMPTS = 3

QUIT_WORDS = {"q", "quit", "exit"}
NEW_WORDS = {"n", "new"}
VIEW_WORDS = {"v", "tab"}
RELOAD_WORDS = {"r", "reload"}

# Row actions: f<n> favorite, e<n> edit, d<n> delete
ROW_ACTION_PATTERN = re.compile(r"([fed])\s*(\d+)")

KEY_HELP = (
    "<number> run  <text> filter  /<text> filter literally  n new  "
    "e<number> edit  d<number> delete  f<number> favorite  v favorites view  "
    "r reload  q quit"
)


class StreamInputMixin:
    """Treat the end of an input stream like the end of stdin."""

    @classmethod
    def get_input(
        cls, console: Console, prompt, password: bool, stream: IO[str] | None = None
    ) -> str:
        value = console.input(prompt, password=password, stream=stream)
        if stream is None:
            return value
        if not value:
            raise EOFError
        return value.rstrip("\n")


class BrowserPrompt(StreamInputMixin, Prompt):
    """Text prompt used by the browser."""


class BrowserConfirm(StreamInputMixin, Confirm):
    """Yes/no prompt used by the browser."""


class InteractiveBrowser:
    """Browse, filter, manage and pick saved commands from the terminal.

    Attributes:
        repository: CommandRepository to read from and write to.
        console: Rich console used for output and prompts.
        stream: Optional input stream (defaults to stdin).
        favorites_only: Whether the list shows favorites only.
    """

    def __init__(
        self,
        repository: CommandRepository,
        console: Console | None = None,
        stream: IO[str] | None = None,
    ) -> None:
        self.repository = repository
        self.console = console or Console()
        self.stream = stream
        self.favorites_only = False

    def _ask(self, prompt: str, default: str | None = None) -> str:
        if default is None:
            return BrowserPrompt.ask(prompt, console=self.console, stream=self.stream)
        return BrowserPrompt.ask(
            prompt,
            console=self.console,
            stream=self.stream,
            default=default,
            show_default=bool(default),
        )

    def _confirm(self, prompt: str) -> bool:
        return BrowserConfirm.ask(prompt, console=self.console, stream=self.stream, default=False)

    def _error(self, message: str) -> None:
        self.console.print(f"[red]Error:[/red] {escape(message)}")

    def _render(self, results: list[Command], total: int, query: str) -> list[Command]:
        shown = results[:PAGE_SIZE]
        self.console.rule("comma - favorites" if self.favorites_only else "comma")
        if query:
            self.console.print(f"Filter: [bold]{escape(query)}[/bold]")

        if shown:
            self.console.print(build_command_table(shown, numbered=True))
        elif self.favorites_only:
            self.console.print("[dim]No favorites yet. Press v to show all commands.[/dim]")
        else:
            self.console.print("[dim]No matching commands.[/dim]")

        footer = format_summary(results)
        if len(results) > len(shown):
            footer += f" (showing first {len(shown)})"
        if query:
            footer += f" of {total}"
        self.console.print(f"[dim]{footer}[/dim]")
        self.console.print(f"[dim]{escape(KEY_HELP)}[/dim]")
        return shown

    def run(self) -> tuple[Command, str] | None:
        """Run the browse loop.

        Returns:
            The picked command and its resolved text, or None if the user quit.
        """
        query = ""
        while True:
            commands = self.repository.list_all()
            if not commands:
                self.console.print("No commands saved yet.")
                self.console.print("Use 'comma add <id> <command>' to create one.")
                return None

            if self.favorites_only:
                commands = [cmd for cmd in commands if cmd.favorite]

            shown = self._render(search_commands(commands, query), len(commands), query)
            try:
                answer = self._ask("comma", default="").strip()
                picked = self._dispatch(answer, shown)
            except EOFError:
                return None

            if picked is None:
                continue
            if picked is False:
                return None
            if isinstance(picked, str):
                query = picked
                continue
            return picked

    def _dispatch(self, answer: str, shown: list[Command]):
        """Handle one answer from the list prompt.

        Returns:
            False to quit, None to redraw, a str for a new filter query, or
            the (command, resolved) pair of a picked command.
        """
        lowered = answer.lower()
        if lowered in QUIT_WORDS:
            return False

        if answer.startswith("/"):
            return answer[1:].strip()

        if lowered in NEW_WORDS:
            self.add_command()
            return None

        if lowered in VIEW_WORDS:
            self.favorites_only = not self.favorites_only
            return None

        if lowered in RELOAD_WORDS:
            self.console.print("Refreshed")
            return None

        if answer.isdigit():
            command = self._row(shown, answer)
            if command is None:
                return None
            return self.pick(command) or False

        action = ROW_ACTION_PATTERN.fullmatch(lowered)
        if action:
            command = self._row(shown, action.group(2))
            if command is not None:
                if action.group(1) == "f":
                    self.toggle_favorite(command)
                elif action.group(1) == "e":
                    self.edit_command(command)
                else:
                    self.delete_command(command)
            return None

        return answer

    def _row(self, shown: list[Command], number: str) -> Command | None:
        index = int(number) - 1
        if 0 <= index < len(shown):
            return shown[index]
        self.console.print(f"[red]No command number {escape(number)}[/red]")
        return None

    def add_command(self) -> Command | None:
        """Ask for a new command's ID, text and description and save it.

        Returns:
            The created command, or None if validation or saving failed.
        """
        command_id = self._ask("ID")
        check = validate_id(command_id)
        if not check.valid:
            self._error(check.error or "Invalid ID")
            return None

        text = self._ask("Command")
        check = validate_command_text(text)
        if not check.valid:
            self._error(check.error or "Invalid command")
            return None

        description = self._ask("Description", default="")
        try:
            created = self.repository.add(command_id, text, description or None)
        except ValueError as e:
            self._error(str(e))
            return None

        self.console.print(f"Added command '{escape(command_id)}'")
        return created

    def edit_command(self, command: Command) -> Command | None:
        """Edit a command's text and description, pre-filled with current values.

        A blank description keeps the current one.
        """
        text = self._ask("Command", default=command.command)
        check = validate_command_text(text)
        if not check.valid:
            self._error(check.error or "Invalid command")
            return None

        description = self._ask("Description", default=command.description or "")
        try:
            updated = self.repository.update(
                command.id, command=text, description=description or None
            )
        except ValueError as e:
            self._error(str(e))
            return None

        self.console.print(f"Updated command '{escape(command.id)}'")
        return updated

    def delete_command(self, command: Command) -> bool:
        """Delete a command after confirmation."""
        self.console.print(f"[cyan]{escape(command.command)}[/cyan]")
        if not self._confirm(f"Delete '{escape(command.id)}'?"):
            self.console.print("Cancelled")
            return False

        try:
            self.repository.delete(command.id)
        except ValueError as e:
            self._error(str(e))
            return False

        self.console.print(f"Deleted command '{escape(command.id)}'")
        return True

    def toggle_favorite(self, command: Command) -> None:
        """Flip a command's favorite flag."""
        try:
            updated = self.repository.toggle_favorite(command.id)
        except ValueError as e:
            self._error(str(e))
            return

        state = "Favorited" if updated.favorite else "Unfavorited"
        self.console.print(f"{state} '{escape(updated.id)}'")

    def prompt_values(self, command: Command) -> dict[str, str] | None:
        """Ask for every placeholder value, pre-filled with defaults.

        Required placeholders are asked again when left empty, up to
        MAX_ATTEMPTS times.

        Returns:
            Mapping of placeholder name to value, or None if a required
            value was never given.
        """
        placeholders = parse_placeholders(command.command)
        values = build_initial_values(placeholders)

        for ph in placeholders:
            label = f"[bold]{escape(ph.name)}[/bold]"
            for _ in range(MAX_ATTEMPTS):
                if ph.required:
                    value = self._ask(label)
                else:
                    value = self._ask(label, default=values[ph.name])
                if value or not ph.required:
                    values[ph.name] = value
                    break
                self.console.print(f"[red]{escape(ph.name)} is required[/red]")
            else:
                logger.debug("Gave up waiting for placeholder %s", ph.name)
                return None

        return values

    def pick(self, command: Command) -> tuple[Command, str] | None:
        """Resolve a picked command, prompting for placeholders if needed."""
        self.console.print(f"[cyan]{escape(command.command)}[/cyan]")
        values = self.prompt_values(command)
        if values is None:
            return None

        result = resolve_values(command, values)
        if not result.success:
            self._error(result.error or "")
            return None
        return command, result.command or ""
