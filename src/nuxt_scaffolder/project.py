"""Project identity for a scaffolding run."""

import re
from pathlib import Path

from pathvalidate import ValidationError, validate_filename
from pydantic import BaseModel, ConfigDict, field_validator

from .constants import MAX_PROJECT_NAME_LENGTH
from .errors import ProjectNameError

_NAME_RE = re.compile(r"^[A-Za-z0-9_][A-Za-z0-9._-]*$")


def validate_project_name(name: str) -> str:
    """
    Validate a project name.

    The name becomes both a directory name and the package.json name, so
    it must be non-empty, filesystem-safe, and made of letters, digits,
    '.', '_' and '-' without a leading '.' or '-'.

    Args:
        name: Candidate project name

    Returns:
        The stripped name

    Raises:
        ProjectNameError: If the name is not acceptable
    """
    name = name.strip()
    if not name:
        raise ProjectNameError("Project name cannot be empty")

    if len(name) > MAX_PROJECT_NAME_LENGTH:
        raise ProjectNameError(f"Project name is longer than {MAX_PROJECT_NAME_LENGTH} characters")

    try:
        validate_filename(name)
    except ValidationError as e:
        raise ProjectNameError(f"Invalid project name '{name}': {e}") from e

    if not _NAME_RE.match(name):
        raise ProjectNameError(
            f"Invalid project name '{name}': use letters, digits, '.', '_' or '-', "
            "and do not start with '.' or '-'"
        )

    return name


class Project(BaseModel):
    """The project being scaffolded. Immutable for the run."""

    model_config = ConfigDict(frozen=True)

    name: str
    root: Path

    @field_validator("name")
    @classmethod
    def check_name(cls, v: str) -> str:
        """Reject names that are not identifier-safe."""
        try:
            return validate_project_name(v)
        except ProjectNameError as e:
            raise ValueError(str(e)) from e

    @field_validator("root")
    @classmethod
    def check_root(cls, v: Path) -> Path:
        """Require an absolute root path."""
        if not v.is_absolute():
            raise ValueError(f"Project root must be absolute: {v}")
        return v

    @classmethod
    def create(cls, name: str, parent_dir: Path) -> "Project":
        """
        Create a project rooted at parent_dir / name.

        Raises:
            ProjectNameError: If the name is invalid
        """
        name = validate_project_name(name)
        return cls(name=name, root=parent_dir.resolve() / name)

    @property
    def parent(self) -> Path:
        """Directory the project directory lives in."""
        return self.root.parent
