"""Subprocess execution with Result-based error handling.

This is the only module that spawns processes. The verification stage uses
it to probe a downloaded binary.

Usage:
    match run([str(binary), "--version"]):
        case Ok(output):
            print(output.stdout)
        case Err(error):
            print(f"Failed: {error}")
"""

from __future__ import annotations

import subprocess
from dataclasses import dataclass

from binwrap.core.result import Err, Ok, Result

__all__ = ["ProcessError", "ProcessOutput", "run", "DEFAULT_TIMEOUT"]

DEFAULT_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class ProcessOutput:
    stdout: str
    stderr: str


@dataclass(frozen=True, slots=True)
class ProcessError:
    """Error from a failed subprocess execution.

    Attributes:
        command: The command that was executed.
        returncode: Exit code, or -1 if the process could not be run.
        stdout: Standard output (may be empty).
        stderr: Standard error, or the spawn/timeout failure message.
    """

    command: tuple[str, ...]
    returncode: int
    stdout: str
    stderr: str

    def __str__(self) -> str:
        cmd_str = " ".join(self.command[:3])
        if len(self.command) > 3:
            cmd_str += " ..."
        if self.returncode == -1:
            return f"{cmd_str} could not run: {self.stderr}"
        return f"{cmd_str} failed (exit {self.returncode})"


def run(
    cmd: list[str],
    *,
    timeout: float | None = DEFAULT_TIMEOUT,
) -> Result[ProcessOutput, ProcessError]:
    """Execute a command and capture its output.

    Args:
        cmd: Command and arguments to execute.
        timeout: Maximum seconds to wait (None for no limit).

    Returns:
        Ok(ProcessOutput) on exit code 0, Err(ProcessError) otherwise.
    """
    try:
        proc = subprocess.run(
            cmd,
            capture_output=True,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
            timeout=timeout,
            check=False,
        )
    except subprocess.TimeoutExpired as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout=e.stdout if isinstance(e.stdout, str) else "",
                stderr=f"timed out after {timeout}s",
            )
        )
    except OSError as e:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=-1,
                stdout="",
                stderr=e.strerror or str(e),
            )
        )

    if proc.returncode != 0:
        return Err(
            ProcessError(
                command=tuple(cmd),
                returncode=proc.returncode,
                stdout=proc.stdout,
                stderr=proc.stderr,
            )
        )

    return Ok(ProcessOutput(stdout=proc.stdout, stderr=proc.stderr))
