# comma/core/shell/integration.py
"""Shell integration for running saved commands in the current shell.

Commands like ``cd`` or ``export`` only work when evaluated by the user's
interactive shell. ``comma init`` prints a wrapper function that calls
``comma --exec`` and evals whatever is printed between the exec markers;
``comma setup`` appends the line that loads this wrapper to the shell's
rc file.
"""

import logging
import os
import shutil
import sys
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path

from comma.config import settings
from comma.core.commands.validation import RESERVED_KEYWORDS

logger = logging.getLogger(__name__)

EXEC_START_MARKER = "__COMMA_EXEC__"
EXEC_END_MARKER = "__COMMA_END__"

INTEGRATION_HEADER = "# Comma - Command Manager"

# Arguments the wrapper passes straight to the binary
_PASSTHROUGH = [kw for kw in RESERVED_KEYWORDS if kw not in ("run", "help")]
_PASSTHROUGH += ["--help", "-h", "--version", "-v"]


@dataclass
class ShellInfo:
    """Detected shell.

    Attributes:
        type: One of "bash", "zsh", "fish" or "unknown".
        config_path: Path of the rc file to patch, None when unknown.
        name: Display name.
    """

    type: str
    config_path: Path | None
    name: str


@dataclass
class InstallResult:
    """Outcome of install_shell_integration.

    Attributes:
        success: Whether the integration is now installed.
        backup_path: Backup of the previous rc file, if one was made.
        error: Error or informational message.
        already_installed: True when nothing had to be written.
    """

    success: bool
    backup_path: Path | None = None
    error: str | None = None
    already_installed: bool = False


def detect_shell(shell: str | None = None, home: Path | None = None) -> ShellInfo:
    """Detect the current shell from settings or $SHELL.

    Args:
        shell: Shell path or name. Defaults to COMMA_SHELL, then $SHELL.
        home: Home directory. Defaults to the current user's home.

    Returns:
        ShellInfo describing the shell and its rc file.
    """
    if shell is None:
        shell = settings.shell or os.environ.get("SHELL", "")
    if home is None:
        home = Path.home()

    name = Path(shell).name if shell else ""

    if "zsh" in name:
        return ShellInfo("zsh", home / ".zshrc", "Zsh")

    if "bash" in name:
        # macOS login shells read .bash_profile
        rc_name = ".bash_profile" if sys.platform == "darwin" else ".bashrc"
        return ShellInfo("bash", home / rc_name, "Bash")

    if "fish" in name:
        return ShellInfo("fish", home / ".config" / "fish" / "config.fish", "Fish")

    return ShellInfo("unknown", None, "Unknown")


def _bash_zsh_function() -> str:
    cases = "|".join(_PASSTHROUGH)
    return f"""{INTEGRATION_HEADER}
# Added by: comma setup
comma() {{
  case "$1" in
    {cases})
      command comma "$@"
      ;;
    "")
      command comma
      ;;
    *)
      local output
      local status

      output=$(command comma --exec "$@" 2>&1)
      status=$?

      if [ $status -eq 0 ]; then
        if echo "$output" | grep -q "^{EXEC_START_MARKER}$"; then
          local cmd
          cmd=$(echo "$output" | sed -n '/{EXEC_START_MARKER}/,/{EXEC_END_MARKER}/p' | sed '1d;$d')
          eval "$cmd"
        else
          echo "$output"
        fi
      else
        echo "$output" >&2
        return $status
      fi
      ;;
  esac
}}"""


def _fish_function() -> str:
    cases = " ".join(_PASSTHROUGH)
    return f"""{INTEGRATION_HEADER}
# Added by: comma setup
function comma
    switch "$argv[1]"
        case {cases}
            command comma $argv
        case ''
            command comma
        case '*'
            set -l output (command comma --exec $argv 2>&1)
            set -l status_code $status

            if test $status_code -eq 0
                if string match -q -- "{EXEC_START_MARKER}" $output
                    set -l cmd (printf '%s\\n' $output | sed -n '/{EXEC_START_MARKER}/,/{EXEC_END_MARKER}/p' | sed '1d;$d')
                    eval (string join \\n $cmd)
                else
                    printf '%s\\n' $output
                end
            else
                printf '%s\\n' $output >&2
                return $status_code
            end
    end
end"""


def generate_shell_init(shell_type: str) -> str:
    """Generate the wrapper function for a shell.

    Args:
        shell_type: "bash", "zsh" or "fish".

    Returns:
        Shell source code, or a comment for unsupported shells.
    """
    if shell_type in ("bash", "zsh"):
        return _bash_zsh_function()
    if shell_type == "fish":
        return _fish_function()
    return f"# Shell type '{shell_type}' is not supported"


def get_init_line(shell_type: str) -> str:
    """The line appended to the rc file to load the wrapper."""
    if shell_type == "fish":
        return "comma init fish | source"
    return 'eval "$(comma init)"'


def is_shell_integration_installed(config_path: Path | None) -> bool:
    """Check if an rc file already loads the wrapper."""
    if config_path is None or not config_path.exists():
        return False

    try:
        content = config_path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        logger.warning("Could not read %s: %s", config_path, e)
        return False

    return "comma init" in content or INTEGRATION_HEADER in content


def install_shell_integration(shell_info: ShellInfo) -> InstallResult:
    """Append the init line to the shell's rc file.

    The existing file is backed up first. Running this twice is a no-op.

    Args:
        shell_info: Shell detected by detect_shell.

    Returns:
        InstallResult describing what happened.
    """
    if shell_info.type == "unknown" or shell_info.config_path is None:
        return InstallResult(
            success=False, error="Could not detect shell type. Please install manually."
        )

    config_path = shell_info.config_path
    if is_shell_integration_installed(config_path):
        return InstallResult(
            success=True,
            error="Shell integration already installed.",
            already_installed=True,
        )

    try:
        backup_path = None
        existing = ""
        if config_path.exists():
            timestamp = datetime.now(timezone.utc).strftime("%Y%m%dT%H%M%S")
            backup_path = config_path.with_name(f"{config_path.name}.backup.{timestamp}")
            shutil.copyfile(config_path, backup_path)
            existing = config_path.read_text(encoding="utf-8")

        init_line = get_init_line(shell_info.type)
        if existing.strip():
            content = f"{existing}\n\n{init_line}\n"
        else:
            content = f"{init_line}\n"

        config_path.parent.mkdir(parents=True, exist_ok=True)
        config_path.write_text(content, encoding="utf-8")
    except OSError as e:
        logger.error("Failed to install shell integration into %s: %s", config_path, e)
        return InstallResult(success=False, error=str(e))

    logger.info("Installed shell integration into %s", config_path)
    return InstallResult(success=True, backup_path=backup_path)


def format_exec_output(command: str) -> str:
    """Wrap a resolved command in the markers the wrapper looks for."""
    return f"{EXEC_START_MARKER}\n{command}\n{EXEC_END_MARKER}"
