# comma/interfaces/cli/app.py
"""Typer application for the comma command line.

Routes subcommands (add, list, search, ...) and treats any other first
argument as the ID of a saved command to run. Machine-readable output
(exec markers, raw commands, JSON) goes to stdout through typer.echo;
human-oriented output uses rich consoles, errors on stderr.
"""

import json
import logging
from enum import Enum
from importlib.metadata import PackageNotFoundError, version
from pathlib import Path
from typing import NoReturn, Optional

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.markup import escape
from typer.core import TyperGroup

from comma.config import settings
from comma.core.commands.executor import CommandExecutor
from comma.core.commands.models import Command
from comma.core.commands.repository import get_repository
from comma.core.commands.schemas import StoreSchema
from comma.core.commands.search import search_commands
from comma.core.commands.validation import validate_command_text, validate_id
from comma.core.shell.integration import (
    detect_shell,
    format_exec_output,
    generate_shell_init,
    get_init_line,
    install_shell_integration,
    is_shell_integration_installed,
)
from comma.interfaces.cli.formatters import (
    build_command_table,
    format_command_info,
    format_command_json,
    format_no_shell_integration,
    format_selected_command,
    format_summary,
    format_version,
)
from comma.interfaces.cli.interactive import InteractiveBrowser
from comma.utils.logging import configure_logging, set_command_id

logger = logging.getLogger(__name__)

console = Console()
err_console = Console(stderr=True)

HELP_EPILOG = """\
Placeholders: use {name} for required values and {name:default} for optional
ones. Escape a literal brace with a backslash: \\{not-a-placeholder\\}.

Examples: comma add deploy "git push {remote:origin} {branch:main}";
comma deploy upstream feature-branch; comma fav deploy.

Run 'comma setup' so commands like 'cd' and 'export' affect your current shell.
"""


def get_version() -> str:
    """Installed package version, or 0.0.0 when running from a checkout."""
    try:
        return version("comma-cli")
    except PackageNotFoundError:
        return "0.0.0"


class CommaGroup(TyperGroup):
    """Group that runs saved commands when the first argument is not a subcommand."""

    def resolve_command(self, ctx: typer.Context, args: list[str]):
        if args and args[0] not in self.commands and not args[0].startswith("-"):
            args = ["run", *args]
        return super().resolve_command(ctx, args)


app = typer.Typer(
    name="comma",
    help="Comma - save, search and re-run shell commands.",
    epilog=HELP_EPILOG,
    add_completion=False,
    invoke_without_command=True,
    no_args_is_help=False,
    cls=CommaGroup,
    context_settings={"help_option_names": ["-h", "--help"]},
)


class OutputFormat(str, Enum):
    TABLE = "table"
    JSON = "json"


def fail(message: str) -> NoReturn:
    """Print an error to stderr and exit with status 1."""
    err_console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
    raise typer.Exit(1)


def _print_commands(commands: list[Command], output: OutputFormat) -> None:
    if output == OutputFormat.JSON:
        typer.echo(format_command_json(commands))
        return

    if not commands:
        console.print("No commands found.\n\nUse 'comma add <id> <command>' to create one.")
        return

    console.print(build_command_table(commands))
    console.print(f"\n{format_summary(commands)}", highlight=False)


def _version_callback(value: bool) -> None:
    if value:
        typer.echo(format_version(get_version()))
        raise typer.Exit()


@app.callback()
def main_callback(
    ctx: typer.Context,
    exec_: bool = typer.Option(
        False, "--exec", help="Print the resolved command between exec markers (shell wrapper)."
    ),
    raw: bool = typer.Option(
        False, "--raw", "-r", help="Print the resolved command only, for eval."
    ),
    version_: bool = typer.Option(
        False,
        "--version",
        "-v",
        callback=_version_callback,
        is_eager=True,
        help="Show version and exit.",
    ),
) -> None:
    """Open the interactive browser when no command is given."""
    ctx.obj = {"exec": exec_, "raw": raw}

    if ctx.invoked_subcommand is not None:
        return

    if exec_ or raw:
        fail("Command ID required")

    browse()


def browse() -> None:
    """Run the interactive browser and report the picked command."""
    repo = get_repository()
    picked = InteractiveBrowser(repo, console=console).run()
    if picked is None:
        return

    command, resolved = picked
    repo.record_usage(command.id)
    integrated = is_shell_integration_installed(detect_shell().config_path)
    console.print(format_selected_command(command.id, resolved, integrated), highlight=False)


@app.command(
    "run",
    context_settings={"ignore_unknown_options": True, "allow_interspersed_args": False},
)
def run(
    ctx: typer.Context,
    command_id: str = typer.Argument(..., help="ID of the saved command."),
    args: Optional[list[str]] = typer.Argument(None, help="Values for placeholders, in order."),
) -> None:
    """Run a saved command, binding ARGS to its placeholders."""
    set_command_id(command_id)
    flags = ctx.obj or {}
    executor = CommandExecutor(get_repository())
    result = executor.prepare(command_id, args or [])

    if not result.success:
        if result.missing or flags.get("exec") or flags.get("raw"):
            fail(result.error or "Failed to resolve command")
        _fail_not_found(command_id, executor)

    resolved = result.command or ""
    logger.debug("Resolved command %s", command_id, extra={"arg_count": len(args or [])})

    if flags.get("raw"):
        typer.echo(resolved)
        executor.record(command_id)
        return

    if flags.get("exec"):
        typer.echo(format_exec_output(resolved))
        executor.record(command_id)
        return

    if not is_shell_integration_installed(detect_shell().config_path):
        console.print(format_no_shell_integration(command_id, resolved), highlight=False)
        return

    # The wrapper normally intercepts this path and uses --exec
    typer.echo(format_exec_output(resolved))


def _fail_not_found(command_id: str, executor: CommandExecutor) -> None:
    err_console.print(f"[red]Error:[/red] Command '{escape(command_id)}' not found", highlight=False)
    commands = executor.repository.list_all()
    if commands:
        err_console.print("\nAvailable commands:")
        for cmd in commands[:5]:
            err_console.print(f"  {escape(cmd.id)}", highlight=False)
        if len(commands) > 5:
            err_console.print(f"  ... and {len(commands) - 5} more")
    raise typer.Exit(1)


@app.command("add", context_settings={"ignore_unknown_options": True})
def add(
    command_id: str = typer.Argument(..., help="New command ID."),
    command: list[str] = typer.Argument(..., help="Command text (words are joined by spaces)."),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="Description."),
) -> None:
    """Add a new command."""
    check = validate_id(command_id)
    if not check.valid:
        fail(check.error or "Invalid ID")

    text = " ".join(command)
    check = validate_command_text(text)
    if not check.valid:
        fail(check.error or "Invalid command")

    try:
        get_repository().add(command_id, text, description)
    except ValueError as e:
        fail(str(e))

    console.print(f"Added command '{escape(command_id)}'", highlight=False)


@app.command("edit", context_settings={"ignore_unknown_options": True})
def edit(
    command_id: str = typer.Argument(..., help="ID of the command to edit."),
    command: Optional[list[str]] = typer.Argument(None, help="New command text."),
    description: Optional[str] = typer.Option(None, "--description", "-d", help="New description."),
) -> None:
    """Edit a command's text or description."""
    repo = get_repository()
    if not repo.exists(command_id):
        fail(f"Command '{command_id}' not found")

    text = " ".join(command) if command else None
    if text is None and description is None:
        fail("Nothing to change: give a new command text or --description")

    if text is not None:
        check = validate_command_text(text)
        if not check.valid:
            fail(check.error or "Invalid command")

    try:
        repo.update(command_id, command=text, description=description)
    except ValueError as e:
        fail(str(e))

    console.print(f"Updated command '{escape(command_id)}'", highlight=False)


@app.command("delete")
def delete(command_id: str = typer.Argument(..., help="ID of the command to delete.")) -> None:
    """Delete a command."""
    try:
        get_repository().delete(command_id)
    except ValueError as e:
        fail(str(e))

    console.print(f"Deleted command '{escape(command_id)}'", highlight=False)


@app.command("list")
def list_(
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--output", "-o", case_sensitive=False, help="Output format."
    ),
) -> None:
    """List all commands."""
    _print_commands(get_repository().list_all(), output)


@app.command("search")
def search(
    query: list[str] = typer.Argument(..., help="Search terms."),
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--output", "-o", case_sensitive=False, help="Output format."
    ),
) -> None:
    """Fuzzy search commands by ID, text and description."""
    results = search_commands(get_repository().list_all(), " ".join(query))
    _print_commands(results, output)


@app.command("fav")
def fav(command_id: str = typer.Argument(..., help="ID of the command.")) -> None:
    """Toggle favorite status."""
    try:
        updated = get_repository().toggle_favorite(command_id)
    except ValueError as e:
        fail(str(e))

    state = "Favorited" if updated.favorite else "Unfavorited"
    console.print(f"{state} '{escape(command_id)}'", highlight=False)


@app.command("favorites")
def favorites(
    output: OutputFormat = typer.Option(
        OutputFormat.TABLE, "--output", "-o", case_sensitive=False, help="Output format."
    ),
) -> None:
    """List favorite commands."""
    _print_commands(get_repository().list_all(favorites_only=True), output)


@app.command("info")
def info(command_id: str = typer.Argument(..., help="ID of the command.")) -> None:
    """Show command details."""
    command = get_repository().get(command_id)
    if command is None:
        fail(f"Command '{command_id}' not found")

    console.print(format_command_info(command), highlight=False, markup=False)


@app.command("setup")
def setup() -> None:
    """Set up shell integration in your shell's rc file."""
    shell_info = detect_shell()

    console.print("Comma - Shell Integration Setup\n")
    console.print(f"Detected shell: {shell_info.name}", highlight=False)
    console.print(f"Config file: {shell_info.config_path or '-'}\n", highlight=False)

    if shell_info.type == "unknown":
        err_console.print("[red]Error:[/red] Could not detect shell type")
        console.print("\nManual setup instructions:")
        console.print('  Add to your shell config: eval "$(comma init)"', markup=False)
        raise typer.Exit(1)

    if is_shell_integration_installed(shell_info.config_path):
        console.print("Shell integration is already installed.")
        console.print("\nIf it's not working, try restarting your shell:")
        console.print("  exec $SHELL", markup=False)
        return

    console.print("This will add the following line to your shell config:")
    console.print(f"  {get_init_line(shell_info.type)}\n", markup=False, highlight=False)

    result = install_shell_integration(shell_info)
    if not result.success:
        fail(result.error or "Failed to install")

    console.print("Shell integration installed successfully!")
    if result.backup_path:
        console.print(f"\nBackup created: {result.backup_path}", highlight=False)
    console.print("\nRestart your shell to activate:")
    console.print("  exec $SHELL", markup=False)
    console.print("\nOr reload your config:")
    console.print(f"  source {shell_info.config_path}", highlight=False)


@app.command("init")
def init(
    shell: Optional[str] = typer.Argument(None, help="bash, zsh or fish (detected if omitted)."),
) -> None:
    """Print the shell wrapper function."""
    typer.echo(generate_shell_init(shell or detect_shell().type))


@app.command("export")
def export(
    file: Optional[Path] = typer.Argument(None, help="File to write (stdout if omitted)."),
) -> None:
    """Export commands to JSON."""
    store = get_repository().export_store()
    payload = json.dumps(store.to_dict(), indent=2, ensure_ascii=False)

    if file is None:
        typer.echo(payload)
        return

    try:
        file.write_text(payload, encoding="utf-8")
    except OSError as e:
        fail(str(e))
    console.print(f"Exported {len(store.commands)} commands to {file}", highlight=False)


@app.command("import")
def import_(
    file: Path = typer.Argument(..., help="JSON file produced by 'comma export'."),
    overwrite: bool = typer.Option(False, "--overwrite", help="Replace commands with the same ID."),
) -> None:
    """Import commands from JSON."""
    try:
        raw = json.loads(file.read_text(encoding="utf-8"))
        incoming = StoreSchema.model_validate(raw).to_store()
    except (OSError, json.JSONDecodeError, ValidationError) as e:
        fail(f"Failed to import {file}: {e}")

    invalid = [cmd.id for cmd in incoming.commands if not validate_id(cmd.id).valid]
    if invalid:
        fail(f"Invalid command IDs in {file}: {', '.join(invalid)}")

    result = get_repository().import_store(incoming, overwrite=overwrite)
    message = f"Imported {result.imported} commands"
    if result.skipped:
        message += f", skipped {result.skipped} existing"
    console.print(message, highlight=False)


# Aliases
app.command("rm", hidden=True)(delete)
app.command("ls", hidden=True)(list_)
app.command("favorite", hidden=True)(fav)
app.command("favs", hidden=True)(favorites)


def main() -> None:
    """Console script entry point."""
    configure_logging(settings.log_level, settings.log_json)
    app()


if __name__ == "__main__":
    main()
