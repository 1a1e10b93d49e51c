"""Tests for semtag.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest

from semtag.core.result import Err, Ok
from semtag.platform.process import ProcessError, run

PYTHON = sys.executable


class TestProcessError:
    """Test ProcessError dataclass."""

    def test_str_short_command(self) -> None:
        error = ProcessError(
            command=("git", "status"),
            returncode=1,
            stdout="",
            stderr="fatal: not a git repository",
        )
        assert str(error) == "git status failed (exit 1)"

    def test_str_long_command_truncated(self) -> None:
        error = ProcessError(
            command=("npx", "nx", "print-affected", "--target=build", "--all"),
            returncode=1,
            stdout="",
            stderr="error",
        )
        assert str(error) == "npx nx print-affected ... failed (exit 1)"

    def test_frozen(self) -> None:
        error = ProcessError(("git",), 1, "", "")
        with pytest.raises(AttributeError):
            error.returncode = 2  # type: ignore[misc]


class TestRun:
    """Test run function."""

    def test_success_returns_stdout(self, tmp_path: Path) -> None:
        result = run([PYTHON, "-c", "print('hello')"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "hello" in result.value

    def test_failure_returns_error(self, tmp_path: Path) -> None:
        result = run([PYTHON, "-c", "import sys; sys.exit(42)"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == 42

    def test_command_not_found(self, tmp_path: Path) -> None:
        result = run(["nonexistent_command_12345"], cwd=tmp_path)

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        # Error message varies by OS and locale
        assert len(result.error.stderr) > 0

    def test_captures_stderr(self, tmp_path: Path) -> None:
        result = run(
            [PYTHON, "-c", "import sys; sys.stderr.write('error msg'); sys.exit(1)"],
            cwd=tmp_path,
        )

        assert isinstance(result, Err)
        assert "error msg" in result.error.stderr

    def test_uses_cwd(self, tmp_path: Path) -> None:
        (tmp_path / "package.json").write_text("{}")

        result = run([PYTHON, "-c", "import os; print(os.listdir('.'))"], cwd=tmp_path)

        assert isinstance(result, Ok)
        assert "package.json" in result.value

    def test_extra_env_is_layered(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("SEMTAG_INHERITED", "kept")

        result = run(
            [
                PYTHON,
                "-c",
                "import os; print(os.environ['SEMTAG_INHERITED'], os.environ['GIT_AUTHOR_NAME'])",
            ],
            cwd=tmp_path,
            extra_env={"GIT_AUTHOR_NAME": "semtag-bot"},
        )

        assert result == Ok("kept semtag-bot\n")

    def test_timeout(self, tmp_path: Path) -> None:
        result = run(
            [PYTHON, "-c", "import time; time.sleep(10)"],
            cwd=tmp_path,
            timeout=0.1,
        )

        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr.lower()
