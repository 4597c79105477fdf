# comma/core/commands/schemas.py
"""Pydantic models for validating the commands file and import payloads.

The on-disk layout uses camelCase keys and epoch-millisecond timestamps.
These schemas accept that layout and convert it into Command dataclasses.
"""

from pydantic import BaseModel, ConfigDict, Field

from comma.core.commands.models import Command, StoreData, from_millis


class CommandSchema(BaseModel):
    """A single saved command as stored on disk."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1, description="Unique command identifier")
    command: str = Field(..., description="Command template")
    description: str | None = Field(None, description="Optional description")
    favorite: bool = Field(False, description="Favorite flag")
    created_at: int = Field(0, alias="createdAt", ge=0, description="Creation time (ms)")
    updated_at: int = Field(0, alias="updatedAt", ge=0, description="Update time (ms)")
    usage_count: int = Field(0, alias="usageCount", ge=0, description="Execution count")
    last_used: int | None = Field(None, alias="lastUsed", ge=0, description="Last execution (ms)")

    def to_command(self) -> Command:
        """Convert to a Command dataclass."""
        return Command(
            id=self.id,
            command=self.command,
            description=self.description,
            favorite=self.favorite,
            created_at=from_millis(self.created_at),
            updated_at=from_millis(self.updated_at),
            usage_count=self.usage_count,
            last_used=from_millis(self.last_used) if self.last_used is not None else None,
        )


class StoreSchema(BaseModel):
    """Root of the commands file (also the export/import format)."""

    version: str = Field(..., min_length=1, description="Schema version")
    commands: list[CommandSchema] = Field(..., description="Saved commands")

    def to_store(self) -> StoreData:
        """Convert to a StoreData dataclass."""
        return StoreData(
            version=self.version,
            commands=[item.to_command() for item in self.commands],
        )
