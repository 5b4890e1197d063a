"""Platform abstraction layer."""

from .detection import (
    Arch,
    Platform,
    PlatformInfo,
    detect,
    normalize_arch,
    normalize_os,
)
from .files import EXECUTABLE_MODE, exists, is_executable, make_executable
from .paths import guard, is_within, locate
from .process import ProcessError, ProcessOutput, run

__all__ = [
    # detection
    "Arch",
    "Platform",
    "PlatformInfo",
    "detect",
    "normalize_arch",
    "normalize_os",
    # files
    "EXECUTABLE_MODE",
    "exists",
    "is_executable",
    "make_executable",
    # paths
    "guard",
    "is_within",
    "locate",
    # process
    "ProcessError",
    "ProcessOutput",
    "run",
]
