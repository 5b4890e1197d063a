"""Error taxonomy and exit codes.

Each failure the acquisition pipeline can report is a small frozen dataclass;
``BinError`` is their union. Callers match on the concrete type:

    match result:
        case Err(NoMatchingBinary(os_name=os_name)):
            ...
        case Err(DownloadFailed(url=url, cause=cause)):
            ...
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from binwrap.fetch.fetcher import FetchError

__all__ = [
    "ErrorCode",
    "InvalidUrl",
    "InvalidVersionRange",
    "PathTraversal",
    "NoMatchingBinary",
    "DownloadFailed",
    "ChmodFailed",
    "BinaryNotWorking",
    "VersionMismatch",
    "ExistenceCheckFailed",
    "ConfigurationError",
    "AcquisitionError",
    "VerificationError",
    "BinError",
    "InvalidConfiguration",
]


class ErrorCode(IntEnum):
    """Exit codes used by the diagnostics CLI.

    - 0: Success
    - 1: User error (bad URL, bad version range, unsafe binary name)
    - 2: Environment error (no binary for this platform)
    - 3: Verification error (binary broken or wrong version)
    - 4: Network error (download or extraction failed)
    - 5: I/O error (stat or chmod failed)
    """

    OK = 0
    USER_ERROR = 1
    ENV_ERROR = 2
    VERIFY_ERROR = 3
    NETWORK_ERROR = 4
    IO_ERROR = 5

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")


@dataclass(frozen=True, slots=True)
class InvalidUrl:
    url: str
    reason: str

    def __str__(self) -> str:
        return f"Invalid source URL {self.url!r}: {self.reason}"


@dataclass(frozen=True, slots=True)
class InvalidVersionRange:
    range: str
    reason: str

    def __str__(self) -> str:
        return f"Invalid version range {self.range!r}: {self.reason}"


@dataclass(frozen=True, slots=True)
class PathTraversal:
    """A computed path escaped the directory it must stay in."""

    root: Path
    candidate: Path

    def __str__(self) -> str:
        return f"Path {self.candidate} escapes {self.root}"


@dataclass(frozen=True, slots=True)
class NoMatchingBinary:
    os_name: str
    arch: str
    path: Path

    def __str__(self) -> str:
        return (
            f"No binary found matching your system ({self.os_name}-{self.arch}). "
            f"It's probably not supported. Expected at: {self.path}"
        )


@dataclass(frozen=True, slots=True)
class DownloadFailed:
    """A source could not be downloaded or extracted.

    Attributes:
        url: The source URL that failed
        cause: Underlying HttpError or ExtractError
    """

    url: str
    cause: FetchError

    def __str__(self) -> str:
        return f"Download failed for {self.url}: {self.cause}"


@dataclass(frozen=True, slots=True)
class ChmodFailed:
    path: Path
    message: str

    def __str__(self) -> str:
        return f"Could not make {self.path} executable: {self.message}"


@dataclass(frozen=True, slots=True)
class BinaryNotWorking:
    path: Path
    detail: str

    def __str__(self) -> str:
        return f"The binary {self.path} doesn't seem to work correctly ({self.detail})"


@dataclass(frozen=True, slots=True)
class VersionMismatch:
    path: Path
    version: str | None
    range: str

    def __str__(self) -> str:
        if self.version is None:
            return f"Could not find a version in the output of {self.path} (wanted {self.range})"
        return f"{self.path} is version {self.version}, which does not satisfy {self.range}"


@dataclass(frozen=True, slots=True)
class ExistenceCheckFailed:
    """Checking for the binary failed for a reason other than "not found"."""

    path: Path
    message: str

    def __str__(self) -> str:
        return f"Could not check {self.path}: {self.message}"


ConfigurationError = InvalidUrl | InvalidVersionRange | PathTraversal

AcquisitionError = (
    PathTraversal | NoMatchingBinary | DownloadFailed | ChmodFailed | ExistenceCheckFailed
)

VerificationError = BinaryNotWorking | VersionMismatch

BinError = (
    InvalidUrl
    | InvalidVersionRange
    | PathTraversal
    | NoMatchingBinary
    | DownloadFailed
    | ChmodFailed
    | BinaryNotWorking
    | VersionMismatch
    | ExistenceCheckFailed
)


class InvalidConfiguration(ValueError):
    """Raised by the fluent builder when a setter receives a bad value.

    The typed error is available as ``error``.
    """

    def __init__(self, error: ConfigurationError) -> None:
        super().__init__(str(error))
        self.error = error
