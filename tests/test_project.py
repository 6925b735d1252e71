"""Tests for project module."""

from pathlib import Path

import pytest
from pydantic import ValidationError

from nuxt_scaffolder.errors import ProjectNameError
from nuxt_scaffolder.project import Project, validate_project_name


class TestValidateProjectName:
    """Tests for validate_project_name."""

    @pytest.mark.parametrize("name", ["my-nuxt-app", "shop", "app_2", "v1.0", "My.App"])
    def test_accepts_valid_names(self, name: str) -> None:
        """Test that identifier-safe names are accepted."""
        assert validate_project_name(name) == name

    def test_strips_whitespace(self) -> None:
        """Test that surrounding whitespace is removed."""
        assert validate_project_name("  shop  ") == "shop"

    @pytest.mark.parametrize("name", ["", "   ", "../evil", "a/b", "-app", ".hidden", "my app", "a:b"])
    def test_rejects_invalid_names(self, name: str) -> None:
        """Test that unsafe names are rejected."""
        with pytest.raises(ProjectNameError):
            validate_project_name(name)

    def test_rejects_overlong_name(self) -> None:
        """Test the length limit."""
        with pytest.raises(ProjectNameError, match="longer than"):
            validate_project_name("a" * 215)

    def test_error_is_value_error(self) -> None:
        """Test that ProjectNameError can be caught as ValueError."""
        with pytest.raises(ValueError):
            validate_project_name("")


class TestProject:
    """Tests for Project model."""

    def test_create_resolves_root(self, tmp_path: Path) -> None:
        """Test that the root is parent_dir / name, resolved."""
        project = Project.create("shop", tmp_path / "sub" / "..")

        assert project.name == "shop"
        assert project.root == tmp_path.resolve() / "shop"
        assert project.parent == tmp_path.resolve()

    def test_create_rejects_bad_name(self, tmp_path: Path) -> None:
        """Test that create raises ProjectNameError for bad names."""
        with pytest.raises(ProjectNameError):
            Project.create("a/b", tmp_path)

    def test_is_frozen(self, tmp_path: Path) -> None:
        """Test that a project cannot be modified."""
        project = Project.create("shop", tmp_path)

        with pytest.raises(ValidationError):
            project.name = "other"  # type: ignore[misc]

    def test_requires_absolute_root(self) -> None:
        """Test that a relative root is rejected."""
        with pytest.raises(ValidationError):
            Project(name="shop", root=Path("relative/shop"))
