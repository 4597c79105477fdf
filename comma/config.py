# comma/config.py
"""Application configuration using pydantic-settings.

Provides a centralized Settings class for all environment variables.
Every variable is prefixed with COMMA_ (e.g. COMMA_CONFIG_DIR).
"""

from pathlib import Path

from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_CONFIG_DIR = Path.home() / ".config" / "comma-cli"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    All settings are loaded from .env file and environment variables.
    Environment variables take precedence over .env file values.
    """

    # Storage
    config_dir: Path = DEFAULT_CONFIG_DIR

    # Logging
    log_level: str = "WARNING"
    log_json: bool = False

    # Fuzzy search cutoff (0-100, higher is stricter)
    search_threshold: float = 60.0

    # Shell override, falls back to $SHELL when empty
    shell: str = ""

    model_config = SettingsConfigDict(
        env_prefix="COMMA_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",  # Ignore unknown env vars
        case_sensitive=False,  # Allow case-insensitive env var names
    )

    @property
    def commands_file(self) -> Path:
        """Get the path of the JSON file holding saved commands.

        Returns:
            Path to commands.json inside the config directory.
        """
        return self.config_dir / "commands.json"


# Singleton instance - import this in your code
settings = Settings()
