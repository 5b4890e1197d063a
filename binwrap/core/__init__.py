"""Core types: Result, error taxonomy, exit codes."""

from .errors import (
    BinaryNotWorking,
    BinError,
    ChmodFailed,
    DownloadFailed,
    ErrorCode,
    ExistenceCheckFailed,
    InvalidConfiguration,
    InvalidUrl,
    InvalidVersionRange,
    NoMatchingBinary,
    PathTraversal,
    VersionMismatch,
)
from .result import Err, Ok, Result, is_err, is_ok

__all__ = [
    # errors
    "BinaryNotWorking",
    "BinError",
    "ChmodFailed",
    "DownloadFailed",
    "ErrorCode",
    "ExistenceCheckFailed",
    "InvalidConfiguration",
    "InvalidUrl",
    "InvalidVersionRange",
    "NoMatchingBinary",
    "PathTraversal",
    "VersionMismatch",
    # result
    "Err",
    "Ok",
    "Result",
    "is_err",
    "is_ok",
]
