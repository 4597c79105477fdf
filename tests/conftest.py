# tests/conftest.py
"""Shared pytest fixtures for all test modules.

Provides common fixtures for:
- Singleton reset (CommandRepository)
- Temporary commands file paths
- An isolated home directory and shell for shell integration
"""

import sys
from collections.abc import Generator
from datetime import datetime, timezone
from pathlib import Path

import pytest

from comma.core.commands.models import Command


@pytest.fixture
def temp_store_path(tmp_path: Path) -> Path:
    """Path of a commands file inside a temporary config directory.

    The file itself does not exist yet.
    """
    return tmp_path / "config" / "commands.json"


@pytest.fixture
def repository(temp_store_path: Path) -> Generator:
    """Fresh CommandRepository singleton bound to a temporary file.

    Resets the singleton before and after the test so no test touches
    the real ~/.config/comma-cli directory.
    """
    from comma.core.commands.repository import get_repository, reset_repository

    reset_repository()
    repo = get_repository(temp_store_path)

    yield repo

    reset_repository()


@pytest.fixture
def isolated_home(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    """Point HOME at an empty directory and pretend to run bash on Linux.

    Returns:
        The temporary home directory.
    """
    from comma.config import settings

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setattr(settings, "shell", "/bin/bash")
    monkeypatch.setattr(sys, "platform", "linux")
    return home


def make_command(
    command_id: str,
    command: str,
    description: str | None = None,
    favorite: bool = False,
    usage_count: int = 0,
) -> Command:
    """Build a Command with fixed timestamps."""
    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    return Command(
        id=command_id,
        command=command,
        description=description,
        favorite=favorite,
        created_at=created,
        updated_at=created,
        usage_count=usage_count,
    )


@pytest.fixture
def sample_commands() -> list[Command]:
    """A small, varied set of saved commands."""
    return [
        make_command(
            "deploy",
            "git push {remote:origin} {branch:main}",
            description="Push to remote",
        ),
        make_command("dev", "cd ~/Development", favorite=True),
        make_command(
            "logs",
            "tail -f /var/log/syslog",
            description="Follow system logs",
            usage_count=4,
        ),
        make_command("docker-clean", "docker system prune -af", usage_count=2),
    ]


@pytest.fixture
def command_factory():
    """Factory building Commands with fixed timestamps."""
    return make_command
