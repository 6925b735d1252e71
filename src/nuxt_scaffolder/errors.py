"""Exception types raised by scaffolding components."""

from pathlib import Path


class ScaffoldError(Exception):
    """
    Base class for failures a pipeline step may report.

    The pipeline catches this type (and only this type) and decides,
    from the step's failure policy, whether to abort or continue.
    """


class ToolError(ScaffoldError):
    """
    Raised when an external command exits non-zero or cannot be spawned.

    Attributes:
        command: The command line that was run
        exit_info: Exit status or spawn failure description
    """

    def __init__(self, command: str, exit_info: str):
        self.command = command
        self.exit_info = exit_info
        super().__init__(f"Command failed ({exit_info}): {command}")


class PatchError(ScaffoldError):
    """
    Raised when a configuration document lacks an expected structural marker.

    This covers a missing factory call opener, unbalanced delimiters and a
    missing anchor key. The document is never written in that case.
    """

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(reason)


class FilesystemError(ScaffoldError):
    """Raised on permission or I/O failures while moving or writing files."""

    def __init__(self, path: Path, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"{path}: {reason}")


class ProjectNameError(ValueError):
    """Raised when a project name is empty or not identifier-safe."""
