"""Tests for the interactive command browser."""

import io

from rich.console import Console

from comma.core.commands.repository import CommandRepository
from comma.interfaces.cli.interactive import InteractiveBrowser


def make_browser(repository, answers: str) -> tuple[InteractiveBrowser, io.StringIO]:
    """Browser reading answers from a string and writing to a buffer."""
    output = io.StringIO()
    console = Console(file=output, width=120, color_system=None)
    return InteractiveBrowser(repository, console=console, stream=io.StringIO(answers)), output


class TestInteractiveBrowser:
    """Test suite for InteractiveBrowser."""

    def test_empty_store(self, repository) -> None:
        """Test that an empty store returns immediately."""
        browser, output = make_browser(repository, "")

        assert browser.run() is None
        assert "No commands saved yet." in output.getvalue()

    def test_quit(self, repository) -> None:
        """Test quitting without picking."""
        repository.add("dev", "cd ~/Development")
        browser, _ = make_browser(repository, "quit\n")

        assert browser.run() is None

    def test_end_of_input(self, repository) -> None:
        """Test that running out of input ends the loop."""
        repository.add("dev", "cd ~/Development")
        browser, _ = make_browser(repository, "")

        assert browser.run() is None

    def test_pick_without_placeholders(self, repository) -> None:
        """Test picking a plain command."""
        repository.add("dev", "cd ~/Development")
        browser, _ = make_browser(repository, "1\n")

        command, resolved = browser.run()

        assert command.id == "dev"
        assert resolved == "cd ~/Development"

    def test_pick_with_defaults(self, repository) -> None:
        """Test that blank answers keep placeholder defaults."""
        repository.add("deploy", "git push {remote:origin} {branch:main}")
        browser, _ = make_browser(repository, "1\n\nfeature\n")

        _, resolved = browser.run()

        assert resolved == "git push origin feature"

    def test_filter_then_pick(self, repository) -> None:
        """Test narrowing the list before picking."""
        repository.add("alpha", "echo alpha")
        repository.add("zulu", "echo zulu")
        browser, output = make_browser(repository, "zulu\n1\n")

        command, _ = browser.run()

        assert command.id == "zulu"
        assert "Filter: zulu" in output.getvalue()

    def test_toggle_favorite(self, repository) -> None:
        """Test toggling a favorite from the browser."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "f1\nq\n")

        assert browser.run() is None
        assert repository.get("dev").favorite is True
        assert "Favorited 'dev'" in output.getvalue()

    def test_out_of_range_number(self, repository) -> None:
        """Test that an invalid row number is reported."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "9\nq\n")

        assert browser.run() is None
        assert "No command number 9" in output.getvalue()

    def test_required_value_retried(self, repository) -> None:
        """Test that a blank required value is asked for again."""
        repository.add("greet", "echo Hello, {name}!")
        browser, output = make_browser(repository, "1\n\nWorld\n")

        _, resolved = browser.run()

        assert resolved == "echo Hello, World!"
        assert "name is required" in output.getvalue()

    def test_required_value_gives_up(self, repository) -> None:
        """Test that the browser gives up after repeated blank answers."""
        repository.add("greet", "echo Hello, {name}!")
        browser, _ = make_browser(repository, "1\n\n\n\n")

        assert browser.run() is None


class TestInteractiveManagement:
    """Test suite for adding, editing, deleting and viewing from the browser."""

    def test_new_command(self, repository) -> None:
        """Test adding a command from the browser."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "n\nlogs\ntail -f app.log\nFollow logs\nq\n")

        assert browser.run() is None
        created = repository.get("logs")
        assert created.command == "tail -f app.log"
        assert created.description == "Follow logs"
        assert "Added command 'logs'" in output.getvalue()

    def test_new_command_without_description(self, repository) -> None:
        """Test that a blank description is stored as unset."""
        repository.add("dev", "cd ~/Development")
        browser, _ = make_browser(repository, "n\nlogs\ntail -f app.log\n\nq\n")

        browser.run()

        assert repository.get("logs").description is None

    def test_new_command_invalid_id(self, repository) -> None:
        """Test that an invalid ID is rejected before asking for the command."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "n\nBad ID\nq\n")

        assert browser.run() is None
        assert repository.get("Bad ID") is None
        assert "lowercase alphanumeric" in output.getvalue()

    def test_new_command_reserved_id(self, repository) -> None:
        """Test that a reserved keyword is rejected."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "new\nlist\nq\n")

        browser.run()

        assert "reserved keyword" in output.getvalue()

    def test_new_command_duplicate(self, repository) -> None:
        """Test that an existing ID is reported instead of overwritten."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "n\ndev\ncd /tmp\n\nq\n")

        browser.run()

        assert repository.get("dev").command == "cd ~/Development"
        assert "already exists" in output.getvalue()

    def test_edit_command(self, repository) -> None:
        """Test editing text and description of a listed command."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "e1\ncd ~/src\nSources\nq\n")

        browser.run()

        updated = repository.get("dev")
        assert updated.command == "cd ~/src"
        assert updated.description == "Sources"
        assert "Updated command 'dev'" in output.getvalue()

    def test_edit_keeps_blank_fields(self, repository) -> None:
        """Test that blank answers keep the current values."""
        repository.add("dev", "cd ~/Development", "Projects")
        browser, _ = make_browser(repository, "e1\n\n\nq\n")

        browser.run()

        unchanged = repository.get("dev")
        assert unchanged.command == "cd ~/Development"
        assert unchanged.description == "Projects"

    def test_delete_confirmed(self, repository) -> None:
        """Test deleting a command after confirming."""
        repository.add("dev", "cd ~/Development")
        repository.add("logs", "tail -f app.log")
        browser, output = make_browser(repository, "d1\ny\nq\n")

        browser.run()

        assert repository.get("dev") is None
        assert repository.get("logs") is not None
        assert "Deleted command 'dev'" in output.getvalue()

    def test_delete_declined(self, repository) -> None:
        """Test that declining keeps the command."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "d1\nn\nq\n")

        browser.run()

        assert repository.get("dev") is not None
        assert "Cancelled" in output.getvalue()

    def test_delete_defaults_to_no(self, repository) -> None:
        """Test that a blank confirmation keeps the command."""
        repository.add("dev", "cd ~/Development")
        browser, _ = make_browser(repository, "d1\n\nq\n")

        browser.run()

        assert repository.get("dev") is not None

    def test_favorites_view(self, repository) -> None:
        """Test that the favorites view lists only favorites."""
        repository.add("alpha", "echo alpha")
        repository.add("zulu", "echo zulu")
        repository.toggle_favorite("zulu")
        browser, _ = make_browser(repository, "v\n1\n")

        command, _ = browser.run()

        assert command.id == "zulu"
        assert browser.favorites_only is True

    def test_favorites_view_toggles_back(self, repository) -> None:
        """Test that a second toggle shows every command again."""
        repository.add("alpha", "echo alpha")
        repository.add("zulu", "echo zulu")
        repository.toggle_favorite("zulu")
        browser, _ = make_browser(repository, "v\nv\n2\n")

        command, _ = browser.run()

        assert command.id == "alpha"
        assert browser.favorites_only is False

    def test_favorites_view_empty(self, repository) -> None:
        """Test the favorites view without favorites."""
        repository.add("dev", "cd ~/Development")
        browser, output = make_browser(repository, "v\nq\n")

        assert browser.run() is None
        assert "No favorites yet" in output.getvalue()

    def test_reload_picks_up_external_changes(self, repository) -> None:
        """Test that reload shows commands saved by another process."""
        repository.add("dev", "cd ~/Development")
        other = CommandRepository(repository.path)

        class ExternalWrite(io.StringIO):
            def readline(self, *args) -> str:
                line = super().readline(*args)
                if line == "r\n":
                    other.add("logs", "tail -f app.log")
                return line

        output = io.StringIO()
        browser = InteractiveBrowser(
            repository,
            console=Console(file=output, width=120, color_system=None),
            stream=ExternalWrite("r\n2\n"),
        )

        command, _ = browser.run()

        assert command.id == "logs"
        assert "Refreshed" in output.getvalue()

    def test_literal_filter(self, repository) -> None:
        """Test that a leading slash filters on text that looks like an action."""
        repository.add("deploy", "git push")
        repository.add("notes", "vim notes.md")
        browser, output = make_browser(repository, "/notes\n1\n")

        command, _ = browser.run()

        assert command.id == "notes"
        assert "Filter: notes" in output.getvalue()
