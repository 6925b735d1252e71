"""Tests for templates module."""

from pathlib import Path

import pytest

from nuxt_scaffolder.constants import WriteOutcome
from nuxt_scaffolder.errors import FilesystemError
from nuxt_scaffolder.templates import (
    INDEX_PAGE_VUE,
    STARTER_FILES,
    TAILWIND_STYLESHEET,
    UI_COMPONENT_FILES,
    materialize,
    write_if_absent,
)


class TestWriteIfAbsent:
    """Tests for write_if_absent."""

    def test_creates_file_and_parents(self, tmp_path: Path) -> None:
        """Test that a missing file is written with its parent directories."""
        path = tmp_path / "a" / "b" / "file.vue"

        assert write_if_absent(path, "content") == WriteOutcome.CREATED
        assert path.read_text(encoding="utf-8") == "content"

    def test_existing_file_is_kept(self, tmp_path: Path) -> None:
        """Test that existing content is never overwritten."""
        path = tmp_path / "file.vue"
        path.write_text("user edit", encoding="utf-8")

        assert write_if_absent(path, "template") == WriteOutcome.SKIPPED_EXISTING
        assert path.read_text(encoding="utf-8") == "user edit"

    def test_existing_empty_file_is_kept(self, tmp_path: Path) -> None:
        """Test that existence alone gates the write."""
        path = tmp_path / "file.vue"
        path.touch()

        assert write_if_absent(path, "template") == WriteOutcome.SKIPPED_EXISTING
        assert path.read_text(encoding="utf-8") == ""

    def test_unwritable_parent_raises(self, tmp_path: Path) -> None:
        """Test that a parent blocked by a file is reported."""
        (tmp_path / "blocker").write_text("x", encoding="utf-8")

        with pytest.raises(FilesystemError):
            write_if_absent(tmp_path / "blocker" / "file.vue", "content")
        assert not (tmp_path / "blocker" / "file.vue").exists()

    def test_failed_write_leaves_no_partial_file(self, tmp_path: Path, monkeypatch) -> None:
        """Test that a write failing midway removes the truncated file."""
        real_open = open

        class _DiskFull:
            def __init__(self, handle):
                self.handle = handle

            def __enter__(self):
                return self

            def __exit__(self, *exc_info):
                self.handle.close()

            def write(self, content: str) -> int:
                self.handle.write(content[:3])
                raise OSError(28, "No space left on device")

        monkeypatch.setattr(
            "nuxt_scaffolder.templates.open",
            lambda *args, **kwargs: _DiskFull(real_open(*args, **kwargs)),
            raising=False,
        )
        path = tmp_path / "file.vue"

        with pytest.raises(FilesystemError, match="No space left"):
            write_if_absent(path, "content")
        assert not path.exists()


class TestStarterFiles:
    """Tests for the starter file set."""

    def test_starter_paths(self) -> None:
        """Test the starter file locations relative to the target root."""
        paths = {step_id: starter.relative_path for step_id, starter in STARTER_FILES.items()}

        assert paths == {
            "entry-file": "app.vue",
            "default-layout": "layouts/default.vue",
            "index-page": "pages/index.vue",
            "example-store": "stores/example.ts",
        }

    def test_index_page_uses_sample_button(self) -> None:
        """Test that the index page imports the sample component."""
        assert 'import { Button } from "~/components/ui/button";' in INDEX_PAGE_VUE

    def test_materialize_all(self, tmp_path: Path) -> None:
        """Test writing every starter file into a target root."""
        target = tmp_path / "app"
        starters = [*STARTER_FILES.values(), TAILWIND_STYLESHEET, *UI_COMPONENT_FILES]

        outcomes = [materialize(target, starter) for starter in starters]

        assert outcomes == [WriteOutcome.CREATED] * len(starters)
        assert (target / "assets" / "css" / "tailwind.css").read_text() == '@import "tailwindcss";\n'
        assert (target / "components" / "ui" / "button" / "index.ts").exists()

        again = [materialize(target, starter) for starter in starters]
        assert again == [WriteOutcome.SKIPPED_EXISTING] * len(starters)
