"""External tool invocation for nuxt-scaffolder."""

import logging
import shlex
import shutil
import subprocess
from dataclasses import dataclass
from pathlib import Path

from .errors import ToolError
from .utils import run_captured

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToolResult:
    """Outcome of one external command.

    Attributes:
        command: Command line as displayed to the user
        error: ToolError when the command failed, None on success
        stdout: Captured standard output
        stderr: Captured standard error
    """

    command: str
    error: ToolError | None = None
    stdout: str = ""
    stderr: str = ""

    @property
    def ok(self) -> bool:
        """Whether the command exited with status 0."""
        return self.error is None

    def check(self) -> "ToolResult":
        """
        Raise the carried error, if any.

        Returns:
            self, when the command succeeded

        Raises:
            ToolError: If the command failed
        """
        if self.error is not None:
            raise self.error
        return self


def split_command(command: str | list[str]) -> list[str]:
    """Split a command line into arguments."""
    if isinstance(command, str):
        return shlex.split(command)
    return list(command)


def invoke(
    working_dir: Path,
    command: str | list[str],
    timeout: float | None = None,
) -> ToolResult:
    """
    Run an external command in a working directory.

    The child's stdout/stderr are captured and never reach the console; its
    side effects on disk are the only observable contract. This function
    never raises for command failures: non-zero exit, spawn failure and
    timeout are all reported through ``ToolResult.error``.

    Args:
        working_dir: Directory the command runs in
        command: Argument list, or a command line split with shlex
        timeout: Timeout in seconds (None for no timeout)

    Returns:
        ToolResult for the command
    """
    args = split_command(command)
    display = shlex.join(args)
    logger.debug(f"Running '{display}' in {working_dir}")

    if not args:
        return ToolResult(command=display, error=ToolError(display, "empty command"))

    try:
        completed = run_captured(args, cwd=working_dir, timeout=timeout)
    except FileNotFoundError as e:
        # Raised for a missing executable and for a missing working directory
        if not working_dir.is_dir():
            exit_info = f"working directory not found: {working_dir}"
        else:
            exit_info = f"command not found: {args[0]}"
        logger.debug(f"Spawn failed for '{display}': {e}")
        return ToolResult(command=display, error=ToolError(display, exit_info))
    except subprocess.TimeoutExpired:
        return ToolResult(command=display, error=ToolError(display, f"timed out after {timeout}s"))
    except OSError as e:
        return ToolResult(command=display, error=ToolError(display, f"spawn failed: {e}"))

    if completed.stdout:
        logger.debug(f"stdout of '{display}':\n{completed.stdout}")
    if completed.stderr:
        logger.debug(f"stderr of '{display}':\n{completed.stderr}")

    if completed.returncode != 0:
        return ToolResult(
            command=display,
            error=ToolError(display, f"exit status {completed.returncode}"),
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )

    return ToolResult(command=display, stdout=completed.stdout or "", stderr=completed.stderr or "")


def verify_tool_available(name: str) -> bool:
    """
    Check whether an external tool is on PATH.

    Args:
        name: Executable name (e.g. "bun")

    Returns:
        True if the tool can be found
    """
    return shutil.which(name) is not None
