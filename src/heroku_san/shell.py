"""Local shell command execution."""

import os
import subprocess
from typing import Dict, Optional

import structlog

from .exceptions import ShellCommandError

logger = structlog.get_logger()

# Variables that leak the caller's interpreter into child processes.
_LEAKY_VARIABLES = ("PYTHONPATH", "PYTHONHOME", "PYTHONSTARTUP", "VIRTUAL_ENV")
_SETTINGS_PREFIX = "HEROKU_SAN_"


def clean_environment() -> Dict[str, str]:
    """Return a copy of the process environment safe to hand to child tools."""
    return {
        key: value
        for key, value in os.environ.items()
        if key not in _LEAKY_VARIABLES and not key.upper().startswith(_SETTINGS_PREFIX)
    }


def sh(
    command: str,
    env: Optional[Dict[str, str]] = None,
    capture: bool = True,
) -> str:
    """Run a command string through the shell.

    Args:
        command: Command line to execute
        env: Environment for the child process (defaults to the current one)
        capture: Collect output instead of streaming it to the terminal

    Returns:
        The command's stdout ("" when not captured)

    Raises:
        ShellCommandError: If the command exits non-zero
    """
    logger.info("shell.command", cmd=command)

    result = subprocess.run(
        command,
        shell=True,
        capture_output=capture,
        text=True,
        env=env,
    )

    if result.returncode != 0:
        stderr = (result.stderr or "").strip()
        logger.error(
            "shell.command.failed",
            cmd=command,
            returncode=result.returncode,
            stderr=stderr,
        )
        raise ShellCommandError(command, result.returncode, stderr)

    if result.stdout:
        logger.debug("shell.command.output", stdout=result.stdout)

    return result.stdout or ""
