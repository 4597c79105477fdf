"""Shell integration package.

Provides shell detection, wrapper function generation and rc file patching
so saved commands can run inside the user's current shell.
"""

from comma.core.shell.integration import (
    EXEC_END_MARKER,
    EXEC_START_MARKER,
    InstallResult,
    ShellInfo,
    detect_shell,
    format_exec_output,
    generate_shell_init,
    get_init_line,
    install_shell_integration,
    is_shell_integration_installed,
)

__all__ = [
    "EXEC_START_MARKER",
    "EXEC_END_MARKER",
    "ShellInfo",
    "InstallResult",
    "detect_shell",
    "generate_shell_init",
    "get_init_line",
    "is_shell_integration_installed",
    "install_shell_integration",
    "format_exec_output",
]
