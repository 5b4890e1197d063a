"""Tests for binwrap.platform.process module."""

from __future__ import annotations

import sys
from pathlib import Path

from binwrap.core.result import Err, Ok
from binwrap.platform.process import ProcessError, run


class TestRun:
    """Tests for run()."""

    def test_success_captures_output(self) -> None:
        """stdout is captured on success."""
        result = run([sys.executable, "-c", "print('gifsicle 1.92')"])
        assert isinstance(result, Ok)
        assert result.value.stdout.strip() == "gifsicle 1.92"

    def test_captures_stderr(self) -> None:
        """stderr is captured too."""
        result = run([sys.executable, "-c", "import sys; sys.stderr.write('warn')"])
        assert isinstance(result, Ok)
        assert result.value.stderr == "warn"

    def test_nonzero_exit(self) -> None:
        """A non-zero exit is an Err."""
        result = run([sys.executable, "-c", "import sys; print('x'); sys.exit(3)"])
        assert isinstance(result, Err)
        assert result.error.returncode == 3
        assert result.error.stdout.strip() == "x"
        assert "exit 3" in str(result.error)

    def test_missing_executable(self, tmp_path: Path) -> None:
        """A missing program is reported with returncode -1."""
        result = run([str(tmp_path / "does-not-exist")])
        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "could not run" in str(result.error)

    def test_timeout(self) -> None:
        """A slow program is stopped and reported."""
        result = run([sys.executable, "-c", "import time; time.sleep(5)"], timeout=0.2)
        assert isinstance(result, Err)
        assert result.error.returncode == -1
        assert "timed out" in result.error.stderr


class TestProcessError:
    """Tests for ProcessError formatting."""

    def test_long_command_is_shortened(self) -> None:
        """Long commands are truncated in messages."""
        error = ProcessError(command=("a", "b", "c", "d"), returncode=1, stdout="", stderr="")
        assert str(error) == "a b c ... failed (exit 1)"
