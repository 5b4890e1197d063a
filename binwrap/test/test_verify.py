"""Tests for binwrap.verify module."""

from __future__ import annotations

from pathlib import Path

from binwrap.core.errors import BinaryNotWorking, VersionMismatch
from binwrap.core.result import Err, Ok, Result
from binwrap.platform.process import ProcessError, ProcessOutput
from binwrap.verify import Verifier

BINARY = Path("/opt/vendor/gifsicle")


class FakeRunner:
    """Answers commands from a table keyed by the argument tuple."""

    def __init__(self, answers: dict[tuple[str, ...], Result[ProcessOutput, ProcessError]]) -> None:
        self.answers = answers
        self.commands: list[list[str]] = []

    def __call__(self, cmd: list[str]) -> Result[ProcessOutput, ProcessError]:
        """Return the canned answer for cmd's arguments."""
        self.commands.append(cmd)
        key = tuple(cmd[1:])
        if key in self.answers:
            return self.answers[key]
        return Err(ProcessError(command=tuple(cmd), returncode=2, stdout="", stderr="unknown option"))


def _out(stdout: str, stderr: str = "") -> Ok[ProcessOutput]:
    return Ok(ProcessOutput(stdout=stdout, stderr=stderr))


class TestCheck:
    """Tests for Verifier.check()."""

    def test_success(self) -> None:
        """A zero exit returns the output."""
        runner = FakeRunner({("--version",): _out("gifsicle 1.92")})
        result = Verifier(runner).check(BINARY, ["--version"])
        assert isinstance(result, Ok)
        assert runner.commands == [[str(BINARY), "--version"]]

    def test_failure_is_binary_not_working(self) -> None:
        """A failed run is BinaryNotWorking."""
        runner = FakeRunner({})
        result = Verifier(runner).check(BINARY, ["--bogus"])
        assert isinstance(result, Err)
        assert isinstance(result.error, BinaryNotWorking)
        assert result.error.path == BINARY
        assert "unknown option" in result.error.detail


class TestVerify:
    """Tests for Verifier.verify()."""

    def test_without_range_only_probes(self) -> None:
        """Without a range only the check command runs."""
        runner = FakeRunner({("--help",): _out("usage")})
        result = Verifier(runner).verify(BINARY, ["--help"])
        assert result == Ok(None)
        assert len(runner.commands) == 1

    def test_range_satisfied_reuses_probe_output(self) -> None:
        """Matching check and version args run the binary once."""
        runner = FakeRunner({("--version",): _out("gifsicle 1.92")})

        result = Verifier(runner).verify(BINARY, ["--version"], version_range=">=1.71")

        assert result == Ok("1.92")
        assert len(runner.commands) == 1

    def test_separate_version_query(self) -> None:
        """Different version args run a second command."""
        runner = FakeRunner({("--help",): _out("usage"), ("-V",): _out("", stderr="tool 2.1.0")})

        result = Verifier(runner).verify(
            BINARY, ["--help"], version_range="^2.0.0", version_args=["-V"]
        )

        assert result == Ok("2.1.0")
        assert [cmd[1:] for cmd in runner.commands] == [["--help"], ["-V"]]

    def test_version_mismatch(self) -> None:
        """An out-of-range version is VersionMismatch."""
        runner = FakeRunner({("--version",): _out("1.0.0")})

        result = Verifier(runner).verify(BINARY, ["--version"], version_range=">=2.0.0")

        assert result == Err(VersionMismatch(path=BINARY, version="1.0.0", range=">=2.0.0"))

    def test_no_version_in_output(self) -> None:
        """Output without a version is a mismatch."""
        runner = FakeRunner({("--version",): _out("no numbers here")})

        result = Verifier(runner).verify(BINARY, ["--version"], version_range=">=1")

        assert isinstance(result, Err)
        assert isinstance(result.error, VersionMismatch)
        assert result.error.version is None

    def test_probe_failure_skips_version_check(self) -> None:
        """A failing check stops before the version query."""
        runner = FakeRunner({("-V",): _out("1.0.0")})

        result = Verifier(runner).verify(BINARY, ["--bad"], version_range="*", version_args=["-V"])

        assert isinstance(result, Err)
        assert isinstance(result.error, BinaryNotWorking)
        assert len(runner.commands) == 1
