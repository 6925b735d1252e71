"""Tests for tool_invoker module."""

import sys
from pathlib import Path

import pytest

from nuxt_scaffolder.errors import ToolError
from nuxt_scaffolder.tool_invoker import ToolResult, invoke, split_command, verify_tool_available


class TestInvoke:
    """Tests for invoke using real child processes."""

    def test_success_captures_output(self, tmp_path: Path) -> None:
        """Test that a zero exit yields an ok result with captured output."""
        result = invoke(tmp_path, [sys.executable, "-c", "print('hello')"])

        assert result.ok
        assert result.error is None
        assert result.stdout.strip() == "hello"

    def test_runs_in_working_directory(self, tmp_path: Path) -> None:
        """Test that side effects land in the working directory."""
        invoke(tmp_path, [sys.executable, "-c", "open('marker.txt', 'w').write('x')"])

        assert (tmp_path / "marker.txt").exists()

    def test_non_zero_exit(self, tmp_path: Path) -> None:
        """Test that a non-zero exit is reported, not raised."""
        result = invoke(tmp_path, [sys.executable, "-c", "import sys; sys.exit(3)"])

        assert not result.ok
        assert isinstance(result.error, ToolError)
        assert result.error.exit_info == "exit status 3"

    def test_missing_command(self, tmp_path: Path) -> None:
        """Test that a command not on PATH is reported as a spawn failure."""
        result = invoke(tmp_path, ["definitely-not-a-real-tool-xyz", "--version"])

        assert not result.ok
        assert result.error.exit_info == "command not found: definitely-not-a-real-tool-xyz"

    def test_missing_working_directory(self, tmp_path: Path) -> None:
        """Test that a missing working directory is reported."""
        result = invoke(tmp_path / "missing", [sys.executable, "-c", "pass"])

        assert not result.ok
        assert "working directory not found" in result.error.exit_info

    def test_timeout(self, tmp_path: Path) -> None:
        """Test that a command exceeding its timeout is reported."""
        result = invoke(tmp_path, [sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)

        assert not result.ok
        assert result.error.exit_info.startswith("timed out")

    def test_empty_command(self, tmp_path: Path) -> None:
        """Test that an empty command is reported."""
        result = invoke(tmp_path, "")

        assert result.error.exit_info == "empty command"

    def test_string_command_is_split(self, tmp_path: Path) -> None:
        """Test that a command line string is split with shell rules."""
        result = invoke(tmp_path, f"'{sys.executable}' -c \"print('a b')\"")

        assert result.ok
        assert result.stdout.strip() == "a b"


class TestToolResult:
    """Tests for ToolResult."""

    def test_check_returns_self_on_success(self) -> None:
        """Test that check passes a successful result through."""
        result = ToolResult(command="bun --version")

        assert result.check() is result

    def test_check_raises_carried_error(self) -> None:
        """Test that check raises the carried ToolError."""
        error = ToolError("bun add x", "exit status 1")

        with pytest.raises(ToolError, match=r"Command failed \(exit status 1\): bun add x"):
            ToolResult(command="bun add x", error=error).check()


class TestHelpers:
    """Tests for split_command and verify_tool_available."""

    def test_split_command(self) -> None:
        """Test splitting strings and copying lists."""
        assert split_command("bun add -d typescript") == ["bun", "add", "-d", "typescript"]
        assert split_command(["a", "b"]) == ["a", "b"]

    def test_verify_tool_available(self) -> None:
        """Test PATH lookup."""
        assert not verify_tool_available("definitely-not-a-real-tool-xyz")
