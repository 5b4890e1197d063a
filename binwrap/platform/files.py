"""Filesystem helpers used by the acquisition pipeline."""

from __future__ import annotations

import os
from pathlib import Path

from binwrap.core.errors import ChmodFailed, ExistenceCheckFailed
from binwrap.core.result import Err, Ok, Result

__all__ = ["EXECUTABLE_MODE", "exists", "is_executable", "make_executable", "remove_files"]

EXECUTABLE_MODE = 0o755


def exists(path: Path) -> Result[bool, ExistenceCheckFailed]:
    """Check whether path exists.

    Only a missing file counts as "does not exist"; any other stat failure
    (permission denied, I/O error, a file where a directory was expected) is
    reported as an error.
    """
    try:
        os.stat(path)
    except FileNotFoundError:
        return Ok(False)
    except OSError as e:
        return Err(ExistenceCheckFailed(path=path, message=e.strerror or str(e)))
    return Ok(True)


def is_executable(path: Path) -> bool:
    """True if path is a regular file the current user may execute."""
    return os.path.isfile(path) and os.access(path, os.X_OK)


def make_executable(path: Path, mode: int = EXECUTABLE_MODE) -> Result[Path, ChmodFailed]:
    """Set path's permission bits (rwxr-xr-x by default)."""
    try:
        path.chmod(mode)
    except OSError as e:
        return Err(ChmodFailed(path=path, message=e.strerror or str(e)))
    return Ok(path)


def remove_files(paths: list[Path]) -> int:
    """Remove the given files, ignoring ones that are already gone.

    Returns:
        Number of files removed
    """
    count = 0
    for path in paths:
        try:
            path.unlink()
        except FileNotFoundError:
            continue
        count += 1
    return count
