"""Error presentation utilities.

Centralized error formatting and exit code mapping for the CLI and for host
tools that want the same messages.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from binwrap.core.errors import (
    BinaryNotWorking,
    BinError,
    ChmodFailed,
    DownloadFailed,
    ErrorCode,
    ExistenceCheckFailed,
    InvalidUrl,
    InvalidVersionRange,
    NoMatchingBinary,
    PathTraversal,
    VersionMismatch,
)
from binwrap.output.console import Style

if TYPE_CHECKING:
    from binwrap.output.console import ConsoleProtocol

__all__ = ["print_bin_error", "bin_error_exit_code"]


def print_bin_error(error: BinError, console: ConsoleProtocol) -> None:
    """Print a pipeline error with a hint where one helps."""
    match error:
        case InvalidUrl(url=url, reason=reason):
            console.error(f"invalid source URL: {url} ({reason})")
        case InvalidVersionRange(range=rng, reason=reason):
            console.error(f"invalid version range: {rng} ({reason})")
        case PathTraversal(root=root, candidate=candidate):
            console.error(f"refusing path outside {root}: {candidate}")
        case NoMatchingBinary(os_name=os_name, arch=arch, path=path):
            console.error(f"no binary found matching your system ({os_name}-{arch})")
            console.print(f"expected at: {path}", Style.DIM)
            console.print("hint: add a source for this platform, or an untagged one", Style.DIM)
        case DownloadFailed(url=url, cause=cause):
            console.error(f"download failed: {url}")
            console.print(str(cause), Style.DIM)
        case ChmodFailed(path=path, message=message):
            console.error(f"could not make executable: {path} ({message})")
        case BinaryNotWorking(path=path, detail=detail):
            console.error(f"binary doesn't seem to work correctly: {path}")
            console.print(detail, Style.DIM)
        case VersionMismatch():
            console.error(str(error))
        case ExistenceCheckFailed(path=path, message=message):
            console.error(f"could not check {path}: {message}")


def bin_error_exit_code(error: BinError) -> int:
    """Get exit code for a pipeline error."""
    match error:
        case InvalidUrl() | InvalidVersionRange() | PathTraversal():
            return int(ErrorCode.USER_ERROR)
        case NoMatchingBinary():
            return int(ErrorCode.ENV_ERROR)
        case BinaryNotWorking() | VersionMismatch():
            return int(ErrorCode.VERIFY_ERROR)
        case DownloadFailed():
            return int(ErrorCode.NETWORK_ERROR)
        case ChmodFailed() | ExistenceCheckFailed():
            return int(ErrorCode.IO_ERROR)
    return int(ErrorCode.USER_ERROR)
