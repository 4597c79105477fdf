# comma/utils/__init__.py
"""Utility functions for the comma command manager."""

from comma.utils.logging import (
    configure_logging,
    get_command_id,
    set_command_id,
)

__all__ = [
    "configure_logging",
    "set_command_id",
    "get_command_id",
]
