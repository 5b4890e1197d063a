"""Platform and architecture detection.

Identifiers follow the values source descriptors are tagged with: the OS is
``linux``, ``darwin`` or ``win32`` (the same strings as ``sys.platform``) and
the architecture is ``x64``, ``arm64``, ``ia32`` or ``arm``. Detection is done
lazily and cached.
"""

from __future__ import annotations

import os as _os
import platform as _platform
import sys as _sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

__all__ = [
    "Platform",
    "Arch",
    "PlatformInfo",
    "detect",
    "detect_arch",
    "detect_platform",
    "normalize_os",
    "normalize_arch",
]


class Platform(Enum):
    """Operating system platform."""

    LINUX = "linux"
    MACOS = "darwin"
    WINDOWS = "win32"
    FREEBSD = "freebsd"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


class Arch(Enum):
    """CPU architecture."""

    X64 = "x64"
    ARM64 = "arm64"
    IA32 = "ia32"
    ARM = "arm"
    UNKNOWN = "unknown"

    def __str__(self) -> str:
        return self.value


_OS_ALIASES = {
    "linux": "linux",
    "darwin": "darwin",
    "macos": "darwin",
    "osx": "darwin",
    "mac": "darwin",
    "win32": "win32",
    "win": "win32",
    "windows": "win32",
    "cygwin": "win32",
    "freebsd": "freebsd",
}

_ARCH_ALIASES = {
    "x64": "x64",
    "x86_64": "x64",
    "amd64": "x64",
    "arm64": "arm64",
    "aarch64": "arm64",
    "ia32": "ia32",
    "x86": "ia32",
    "i386": "ia32",
    "i686": "ia32",
    "arm": "arm",
    "armv7l": "arm",
    "armv6l": "arm",
}


def normalize_os(name: str) -> str:
    """Map an OS tag to its canonical spelling ("macos" -> "darwin").

    Unknown tags are returned lowercased so they can still match exactly.
    """
    key = name.strip().lower()
    return _OS_ALIASES.get(key, key)


def normalize_arch(name: str) -> str:
    """Map an architecture tag to its canonical spelling ("amd64" -> "x64")."""
    key = name.strip().lower()
    return _ARCH_ALIASES.get(key, key)


@dataclass(frozen=True, slots=True)
class PlatformInfo:
    """Detected OS and architecture. Use `detect()` to get an instance."""

    platform: Platform
    arch: Arch

    @property
    def os_name(self) -> str:
        return self.platform.value

    @property
    def arch_name(self) -> str:
        return self.arch.value

    def __str__(self) -> str:
        return f"{self.platform}-{self.arch}"


@lru_cache(maxsize=1)
def detect_platform() -> Platform:
    """Detect the current operating system (cached)."""
    # NOTE: avoid platform.system() on Windows, it may query WMI.
    system = _sys.platform.lower()
    if system.startswith("linux"):
        return Platform.LINUX
    if system.startswith("darwin"):
        return Platform.MACOS
    if system.startswith(("win32", "cygwin", "msys")):
        return Platform.WINDOWS
    if system.startswith("freebsd"):
        return Platform.FREEBSD
    return Platform.UNKNOWN


@lru_cache(maxsize=1)
def detect_arch() -> Arch:
    """Detect the current CPU architecture (cached)."""
    if detect_platform() == Platform.WINDOWS:
        machine = (
            _os.environ.get("PROCESSOR_ARCHITEW6432")
            or _os.environ.get("PROCESSOR_ARCHITECTURE")
            or ""
        )
    else:
        machine = _platform.machine()
    canonical = normalize_arch(machine)
    try:
        return Arch(canonical)
    except ValueError:
        return Arch.UNKNOWN


@lru_cache(maxsize=1)
def detect() -> PlatformInfo:
    """Detect complete platform information (cached)."""
    return PlatformInfo(platform=detect_platform(), arch=detect_arch())
