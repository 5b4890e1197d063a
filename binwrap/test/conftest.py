"""Shared fixtures: in-memory archives and fake binaries."""

from __future__ import annotations

import io
import tarfile
import zipfile
from collections.abc import Callable, Mapping

import pytest

type ArchiveBuilder = Callable[[Mapping[str, bytes | tuple[bytes, int]]], bytes]


def _entries(
    files: Mapping[str, bytes | tuple[bytes, int]],
) -> list[tuple[str, bytes, int]]:
    out: list[tuple[str, bytes, int]] = []
    for name, value in files.items():
        data, mode = value if isinstance(value, tuple) else (value, 0o644)
        out.append((name, data, mode))
    return out


def build_tar_gz(files: Mapping[str, bytes | tuple[bytes, int]]) -> bytes:
    buf = io.BytesIO()
    with tarfile.open(fileobj=buf, mode="w:gz") as tar:
        for name, data, mode in _entries(files):
            info = tarfile.TarInfo(name)
            info.size = len(data)
            info.mode = mode
            tar.addfile(info, io.BytesIO(data))
    return buf.getvalue()


def build_zip(files: Mapping[str, bytes | tuple[bytes, int]]) -> bytes:
    buf = io.BytesIO()
    with zipfile.ZipFile(buf, "w") as zf:
        for name, data, mode in _entries(files):
            info = zipfile.ZipInfo(name)
            info.external_attr = (0o100000 | mode) << 16
            zf.writestr(info, data)
    return buf.getvalue()


def _shell_script(stdout: str, exit_code: int = 0) -> bytes:
    """A /bin/sh program that prints stdout and exits with exit_code."""
    return f"#!/bin/sh\necho '{stdout}'\nexit {exit_code}\n".encode()


@pytest.fixture
def tar_gz() -> ArchiveBuilder:
    """Build .tar.gz bytes from a name-to-content mapping."""
    return build_tar_gz


@pytest.fixture
def zip_archive() -> ArchiveBuilder:
    """Build .zip bytes from a name-to-content mapping."""
    return build_zip


@pytest.fixture
def script() -> Callable[..., bytes]:
    """Build a shell script that prints a line and exits."""
    return _shell_script
