"""Utility functions for nuxt-scaffolder."""

import logging
import os
import shutil
import subprocess
import time
from collections.abc import Callable
from contextlib import contextmanager
from functools import wraps
from pathlib import Path
from typing import Iterator, ParamSpec, TypeVar

from rich.console import Console
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.prompt import Prompt

logger = logging.getLogger(__name__)

T = TypeVar("T")
P = ParamSpec("P")


def ensure_dir(path: Path) -> Path:
    """
    Create directory if it doesn't exist.

    Args:
        path: Directory path to create

    Returns:
        The created/existing directory path
    """
    path.mkdir(parents=True, exist_ok=True)
    return path


def expand_path(path: str) -> Path:
    """
    Expand ~ and environment variables in path.

    Args:
        path: Path string to expand

    Returns:
        Expanded Path object
    """
    return Path(os.path.expanduser(os.path.expandvars(path))).resolve()


def is_empty_dir(path: Path) -> bool:
    """Return True when path is missing, not a directory, or has no entries."""
    if not path.is_dir():
        return True
    return next(path.iterdir(), None) is None


def prompt_text(message: str, default: str) -> str:
    """
    Prompt user for a line of text.

    Args:
        message: Prompt message
        default: Value used when the user just presses Enter

    Returns:
        The entered text, stripped
    """
    return Prompt.ask(message, default=default).strip()


def run_captured(cmd: list[str], cwd: Path, timeout: float | None = None) -> subprocess.CompletedProcess:
    """
    Run a command with stdin closed and its output captured as text.

    The exit status is left for the caller to inspect.

    Raises:
        FileNotFoundError: If the executable or cwd does not exist
        subprocess.TimeoutExpired: If the command outlives timeout
    """
    return subprocess.run(
        cmd,
        cwd=cwd,
        stdin=subprocess.DEVNULL,
        capture_output=True,
        text=True,
        check=False,
        timeout=timeout,
    )


@contextmanager
def progress_spinner(description: str, console: Console) -> Iterator[tuple[Progress, int]]:
    """
    Create a progress spinner context manager.

    Args:
        description: Task description to display
        console: Rich console for output

    Yields:
        Tuple of (progress, task_id)
    """
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        task = progress.add_task(description, total=None)
        yield progress, task


def safe_rmtree(path: Path) -> None:
    """
    Safely remove a directory tree, refusing to follow symlinks.

    Args:
        path: Directory path to remove

    Raises:
        ValueError: If path is a symlink or not a directory
        OSError: If removal fails
    """
    if path.is_symlink():
        raise ValueError(f"Refusing to remove symlinked directory: {path}")

    try:
        resolved = path.resolve(strict=True)
        if not resolved.is_dir():
            raise ValueError(f"Path is not a directory: {path}")
    except (OSError, RuntimeError) as e:
        raise ValueError(f"Cannot safely resolve path {path}: {e}") from e

    shutil.rmtree(path)


def move_directory_contents(source: Path, dest: Path) -> list[str]:
    """
    Move all contents from source directory into destination directory.

    Directories that already exist in the destination are merged
    recursively; colliding files are overwritten. The source directory
    itself is left in place (empty).

    Args:
        source: Source directory path
        dest: Destination directory path

    Returns:
        Names of the top-level items moved

    Raises:
        OSError: If a move fails
    """
    ensure_dir(dest)
    moved: list[str] = []

    for item in sorted(source.iterdir()):
        dest_item = dest / item.name

        if item.is_dir() and not item.is_symlink() and dest_item.is_dir():
            move_directory_contents(item, dest_item)
            item.rmdir()
        else:
            if dest_item.is_dir() and not dest_item.is_symlink():
                safe_rmtree(dest_item)
            elif dest_item.exists() or dest_item.is_symlink():
                dest_item.unlink()
            shutil.move(str(item), str(dest_item))

        moved.append(item.name)

    return moved


def exponential_backoff(attempt: int, base: float = 2.0, max_delay: float = 60.0) -> float:
    """
    Calculate exponential backoff delay.

    Args:
        attempt: Retry attempt number (0-indexed)
        base: Base multiplier for exponential growth
        max_delay: Maximum delay in seconds

    Returns:
        Delay in seconds
    """
    delay = base**attempt
    return min(delay, max_delay)


def retry(
    max_attempts: int = 3,
    backoff: Callable[[int], float] = exponential_backoff,
    exceptions: tuple[type[Exception], ...] = (Exception,),
    on_retry: Callable[[Exception, int], None] | None = None,
):
    """
    Decorator to retry a function on failure with exponential backoff.

    Args:
        max_attempts: Maximum number of attempts (default: 3)
        backoff: Function that calculates delay based on attempt number
        exceptions: Tuple of exception types to catch and retry
        on_retry: Callback function called on each retry (exception, attempt_num)

    Examples:
        @retry(max_attempts=3, exceptions=(ToolError,))
        def install_dependencies(project: Project) -> None:
            ...
    """

    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        @wraps(func)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> T:
            last_exception = None

            for attempt in range(max_attempts):
                try:
                    return func(*args, **kwargs)
                except exceptions as e:
                    last_exception = e

                    # Don't retry on last attempt
                    if attempt == max_attempts - 1:
                        break

                    delay = backoff(attempt)

                    if on_retry:
                        on_retry(e, attempt + 1)

                    time.sleep(delay)

            if last_exception:
                raise last_exception

            raise RuntimeError("Retry logic error")

        return wrapper

    return decorator
