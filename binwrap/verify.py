"""Post-acquisition verification.

A binary is "working" when running it with the probe arguments exits with
status 0. When a version range is configured, the binary is run again with
the version arguments and the first version found in its output must satisfy
the range.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from pathlib import Path

from binwrap.core.errors import BinaryNotWorking, VerificationError, VersionMismatch
from binwrap.core.result import Err, Ok, Result
from binwrap.platform.process import ProcessError, ProcessOutput, run
from binwrap.semver import find_version, satisfies

__all__ = ["Verifier", "ProbeRunner"]

type ProbeRunner = Callable[[list[str]], Result[ProcessOutput, ProcessError]]


def _detail(error: ProcessError) -> str:
    stderr = error.stderr.strip().splitlines()
    if stderr and error.returncode != -1:
        return f"{error}: {stderr[-1]}"
    return str(error)


def _match_version(
    binary: Path, output: ProcessOutput, version_range: str
) -> Result[str, VersionMismatch]:
    version = find_version(output.stdout) or find_version(output.stderr)
    if version is None or not satisfies(version, version_range):
        return Err(VersionMismatch(path=binary, version=version, range=version_range))
    return Ok(version)


class Verifier:
    """Runs the probe and version checks against a binary.

    Args:
        runner: Executes a command; defaults to `binwrap.platform.process.run`
        timeout: Seconds each probe may take
    """

    def __init__(self, runner: ProbeRunner | None = None, *, timeout: float = 30.0) -> None:
        self._runner = runner if runner is not None else self._run
        self._timeout = timeout

    def _run(self, cmd: list[str]) -> Result[ProcessOutput, ProcessError]:
        return run(cmd, timeout=self._timeout)

    def check(self, binary: Path, args: Sequence[str]) -> Result[ProcessOutput, BinaryNotWorking]:
        """Run the binary with args; fail unless it exits with status 0."""
        result = self._runner([str(binary), *args])
        if isinstance(result, Err):
            return Err(BinaryNotWorking(path=binary, detail=_detail(result.error)))
        return result

    def check_version(
        self, binary: Path, version_range: str, args: Sequence[str]
    ) -> Result[str, VerificationError]:
        """Run the binary with args and check the reported version.

        Returns:
            Ok with the version found, or Err with BinaryNotWorking/VersionMismatch
        """
        checked = self.check(binary, args)
        if isinstance(checked, Err):
            return checked

        return _match_version(binary, checked.value, version_range)

    def verify(
        self,
        binary: Path,
        check_args: Sequence[str],
        version_range: str | None = None,
        version_args: Sequence[str] = ("--version",),
    ) -> Result[str | None, VerificationError]:
        """Probe the binary, then check its version if a range is given.

        Returns:
            Ok with the detected version (None when no range was given), or Err
        """
        checked = self.check(binary, check_args)
        if isinstance(checked, Err):
            return checked
        if version_range is None:
            return Ok(None)

        # Reuse the probe output when it was already a version query
        if tuple(check_args) == tuple(version_args):
            return _match_version(binary, checked.value, version_range)

        return self.check_version(binary, version_range, version_args)
