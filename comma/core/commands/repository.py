# comma/core/commands/repository.py
"""JSON file repository for Command persistence.

This module provides CRUD operations for saved commands backed by a single
JSON file. Every mutation loads the file, applies the change and writes the
whole document back through a temporary file and an atomic rename.
"""

import json
import logging
import os
import shutil
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from comma.config import settings
from comma.core.commands.models import Command, StoreData, utc_now
from comma.core.commands.schemas import StoreSchema
from comma.core.commands.search import sort_commands

logger = logging.getLogger(__name__)


@dataclass
class ImportResult:
    """Counts reported by CommandRepository.import_store.

    Attributes:
        imported: Commands added or overwritten.
        skipped: Commands left alone because their ID already existed.
    """

    imported: int
    skipped: int


def create_backup(path: Path) -> Path | None:
    """Copy a file next to itself with a timestamp suffix.

    Args:
        path: File to back up.

    Returns:
        Path of the backup, or None if the file does not exist.
    """
    if not path.exists():
        return None

    timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
    backup_path = path.with_name(f"{path.name}.backup.{timestamp}")
    shutil.copyfile(path, backup_path)
    return backup_path


class CommandRepository:
    """Repository for storing and retrieving commands from a JSON file.

    Provides full CRUD operations for Command objects. The repository
    auto-creates the parent directory on initialization; the file itself
    is created on the first write.

    Attributes:
        path: Path to the JSON commands file.

    Example:
        >>> repo = CommandRepository(path=Path("/tmp/comma/commands.json"))
        >>> created = repo.add("dev", "cd ~/Development")
        >>> print(f"Created command: {created.id}")
    """

    def __init__(self, path: Path | str | None = None) -> None:
        """Initialize the CommandRepository.

        Args:
            path: Path to the JSON file. Defaults to settings.commands_file.
        """
        self.path = Path(path) if path is not None else settings.commands_file
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def load(self) -> StoreData:
        """Load the command store from disk.

        A missing file yields an empty store. An unreadable or malformed
        file is backed up and replaced by an empty store.

        Returns:
            StoreData with commands in file order.
        """
        if not self.path.exists():
            return StoreData()

        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
            return StoreSchema.model_validate(raw).to_store()
        except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
            backup_path = create_backup(self.path)
            logger.warning(
                "Commands file %s is corrupted (%s), backed up to %s",
                self.path,
                type(e).__name__,
                backup_path,
                extra={"store": self.path, "backup": backup_path},
            )
            return StoreData()

    def save(self, store: StoreData) -> None:
        """Save the command store to disk atomically.

        Writes to a temporary file in the same directory, then renames it
        over the target. The temporary file is removed if anything fails.

        Args:
            store: Store contents to persist.
        """
        self.path.parent.mkdir(parents=True, exist_ok=True)
        temp_path = self.path.with_name(f"{self.path.name}.tmp.{os.getpid()}")

        try:
            temp_path.write_text(
                json.dumps(store.to_dict(), indent=2, ensure_ascii=False),
                encoding="utf-8",
            )
            os.replace(temp_path, self.path)
        except OSError:
            temp_path.unlink(missing_ok=True)
            raise

        logger.debug(
            "Saved %d commands to %s",
            len(store.commands),
            self.path,
            extra={"store": self.path, "count": len(store.commands)},
        )

    @staticmethod
    def _index_of(store: StoreData, command_id: str) -> int:
        for index, cmd in enumerate(store.commands):
            if cmd.id == command_id:
                return index
        return -1

    def list_all(self, favorites_only: bool = False) -> list[Command]:
        """List commands, favorites first, then by usage, then by ID.

        Args:
            favorites_only: Only return favorited commands.

        Returns:
            List of Command objects, empty list if none exist.
        """
        commands = self.load().commands
        if favorites_only:
            commands = [cmd for cmd in commands if cmd.favorite]
        return sort_commands(commands)

    def get(self, command_id: str) -> Command | None:
        """Retrieve a command by its ID.

        Args:
            command_id: ID to look up (exact match).

        Returns:
            Command if found, None otherwise.
        """
        store = self.load()
        index = self._index_of(store, command_id)
        return store.commands[index] if index != -1 else None

    def exists(self, command_id: str) -> bool:
        """Check if a command ID exists."""
        return self.get(command_id) is not None

    def add(self, command_id: str, command: str, description: str | None = None) -> Command:
        """Add a new command.

        Args:
            command_id: Unique ID, already validated by the caller.
            command: Command template.
            description: Optional description.

        Returns:
            The created Command.

        Raises:
            ValueError: If a command with the same ID exists.
        """
        store = self.load()
        if self._index_of(store, command_id) != -1:
            raise ValueError(f"Command '{command_id}' already exists")

        now = utc_now()
        created = Command(
            id=command_id,
            command=command,
            description=description,
            favorite=False,
            created_at=now,
            updated_at=now,
            usage_count=0,
        )
        store.commands.append(created)
        self.save(store)

        logger.info("Added command %s", command_id)
        return created

    def update(
        self,
        command_id: str,
        command: str | None = None,
        description: str | None = None,
        favorite: bool | None = None,
    ) -> Command:
        """Update an existing command.

        Fields left as None keep their current value. The ID, creation
        time and usage statistics are never changed here; updated_at is
        set to the current time.

        Raises:
            ValueError: If no command with the given ID exists.
        """
        store = self.load()
        index = self._index_of(store, command_id)
        if index == -1:
            raise ValueError(f"Command '{command_id}' not found")

        existing = store.commands[index]
        updated = replace(
            existing,
            command=command if command is not None else existing.command,
            description=description if description is not None else existing.description,
            favorite=favorite if favorite is not None else existing.favorite,
            updated_at=utc_now(),
        )
        store.commands[index] = updated
        self.save(store)

        logger.info("Updated command %s", command_id)
        return updated

    def delete(self, command_id: str) -> None:
        """Delete a command by its ID.

        Raises:
            ValueError: If no command with the given ID exists.
        """
        store = self.load()
        index = self._index_of(store, command_id)
        if index == -1:
            raise ValueError(f"Command '{command_id}' not found")

        del store.commands[index]
        self.save(store)
        logger.info("Deleted command %s", command_id)

    def toggle_favorite(self, command_id: str) -> Command:
        """Flip the favorite flag of a command.

        Raises:
            ValueError: If no command with the given ID exists.
        """
        existing = self.get(command_id)
        if existing is None:
            raise ValueError(f"Command '{command_id}' not found")
        return self.update(command_id, favorite=not existing.favorite)

    def record_usage(self, command_id: str) -> None:
        """Increment the usage count and set last_used.

        Unknown IDs are ignored.
        """
        store = self.load()
        index = self._index_of(store, command_id)
        if index == -1:
            logger.debug("Usage not recorded, command %s not found", command_id)
            return

        existing = store.commands[index]
        store.commands[index] = replace(
            existing, usage_count=existing.usage_count + 1, last_used=utc_now()
        )
        self.save(store)

    def export_store(self) -> StoreData:
        """Return the full store for export."""
        return self.load()

    def import_store(self, incoming: StoreData, overwrite: bool = False) -> ImportResult:
        """Merge commands from another store into this one.

        New IDs are appended. Existing IDs are replaced when overwrite is
        True and skipped otherwise.

        Args:
            incoming: Store to import from.
            overwrite: Replace commands whose ID already exists.

        Returns:
            ImportResult with imported and skipped counts.
        """
        store = self.load()
        imported = 0
        skipped = 0

        for cmd in incoming.commands:
            index = self._index_of(store, cmd.id)
            if index == -1:
                store.commands.append(cmd)
                imported += 1
            elif overwrite:
                store.commands[index] = cmd
                imported += 1
            else:
                skipped += 1

        self.save(store)
        logger.info("Imported %d commands, skipped %d", imported, skipped)
        return ImportResult(imported=imported, skipped=skipped)


_repository: CommandRepository | None = None


def get_repository(path: Path | str | None = None) -> CommandRepository:
    """Get the singleton CommandRepository instance.

    Args:
        path: Path to the commands file (only used on first call).

    Returns:
        CommandRepository singleton instance.
    """
    global _repository
    if _repository is None:
        _repository = CommandRepository(path)
    return _repository


def reset_repository() -> None:
    """Reset the singleton (for testing).

    Creates a fresh instance on next get_repository() call.
    """
    global _repository
    _repository = None
