"""Archive extraction.

This module provides an Extractor that:
- Extracts tar (plain, gz, xz, bz2) and zip archives into a directory
- Strips leading path components, always keeping each entry's file name
- Skips entries that are absolute, contain "..", are links or devices,
  or would land outside the destination
- Writes each entry through a staging file, so targets are never left half-written
- Reports every file it wrote, and removes the ones it created if extraction fails
"""

from __future__ import annotations

import os
import shutil
import stat
import tarfile
import zipfile
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import IO

from binwrap.core.result import Err, Ok, Result
from binwrap.platform.files import remove_files
from binwrap.platform.paths import is_within

__all__ = ["Extractor", "ExtractError", "Extraction", "archive_format"]

_TAR_SUFFIXES: dict[str, str] = {
    ".tar.gz": "r:gz",
    ".tgz": "r:gz",
    ".tar.xz": "r:xz",
    ".txz": "r:xz",
    ".tar.bz2": "r:bz2",
    ".tbz2": "r:bz2",
    ".tbz": "r:bz2",
    ".tar": "r:",
}

_STAGING_SUFFIX = ".binwrap-part"


@dataclass(frozen=True, slots=True)
class ExtractError:
    """Extraction error details.

    Attributes:
        archive: Path to the archive that failed
        message: Human-readable error message
    """

    archive: Path
    message: str

    def __str__(self) -> str:
        return f"{self.message}: {self.archive.name}"


@dataclass(frozen=True, slots=True)
class Extraction:
    """Files written by one extraction.

    Attributes:
        paths: Every file written, in archive order
        created: The subset of paths that did not exist before extraction
    """

    paths: tuple[Path, ...]
    created: tuple[Path, ...]


def archive_format(path: Path) -> str | None:
    """Return "zip", a tarfile open mode, or None if path is not an archive.

    The file name decides first. A name without a known suffix is sniffed, so
    archives served from URLs like ``/download?id=3`` are still extracted.
    """
    # NOTE: Path.suffixes is unreliable for names like "tool-1.2.3-linux.zip".
    name = path.name.lower()
    if name.endswith(".zip"):
        return "zip"
    for suffix, mode in _TAR_SUFFIXES.items():
        if name.endswith(suffix):
            return mode

    try:
        if zipfile.is_zipfile(path):
            return "zip"
        if tarfile.is_tarfile(path):
            return "r:*"
    except OSError:
        return None
    return None


def strip_entry(member_name: str, strip: int) -> Path | None:
    """Return the relative path an entry is extracted to, or None if unsafe.

    Leading components are removed up to `strip`, but never the last one:
    ``strip_entry("gifsicle", 1)`` is ``gifsicle``.
    """
    normalized = member_name.replace("\\", "/")
    if normalized.startswith("/"):
        return None

    parts = [part for part in PurePosixPath(normalized).parts if part != "."]
    if not parts:
        return None
    if any(part in {"", ".."} for part in parts):
        return None
    if parts[0].endswith(":"):
        return None

    kept = parts[min(strip, len(parts) - 1) :]
    return Path(*kept)


class Extractor:
    """Archive extractor.

    Usage:
        extractor = Extractor()
        result = extractor.extract(archive_path, dest, strip=1)
        if is_ok(result):
            print(f"Wrote {len(result.value.paths)} files")
    """

    def extract(
        self,
        archive: Path,
        dest: Path,
        *,
        strip: int = 0,
    ) -> Result[Extraction, ExtractError]:
        """Extract archive into dest.

        Existing files in dest are overwritten; other files are left alone.
        Each entry is written to a staging file next to its target and renamed
        into place once complete, so a failed entry never leaves a partial
        file at the target path. On failure, files that did not exist before
        the extraction are removed again.

        Args:
            archive: Path to archive file
            dest: Directory to extract into (created if missing)
            strip: Number of leading path components to remove

        Returns:
            Ok with the files written, or Err with ExtractError
        """
        if strip < 0:
            return Err(ExtractError(archive=archive, message="strip must not be negative"))
        if not archive.exists():
            return Err(ExtractError(archive=archive, message="Archive not found"))

        fmt = archive_format(archive)
        if fmt is None:
            return Err(ExtractError(archive=archive, message="Unsupported archive format"))

        written: list[Path] = []
        created: list[Path] = []
        try:
            dest.mkdir(parents=True, exist_ok=True)
            if fmt == "zip":
                self._extract_zip(archive, dest, strip, written, created)
            else:
                self._extract_tar(archive, dest, strip, fmt, written, created)
        except (tarfile.TarError, EOFError) as e:
            remove_files(created)
            return Err(ExtractError(archive=archive, message=f"Tar extraction failed: {e}"))
        except zipfile.BadZipFile as e:
            remove_files(created)
            return Err(ExtractError(archive=archive, message=f"Invalid zip file: {e}"))
        except OSError as e:
            remove_files(created)
            return Err(ExtractError(archive=archive, message=f"IO error: {e}"))

        return Ok(Extraction(paths=tuple(written), created=tuple(created)))

    def _target(self, dest: Path, member_name: str, strip: int) -> Path | None:
        rel_path = strip_entry(member_name, strip)
        if rel_path is None:
            return None
        target = dest / rel_path
        if not is_within(dest, target):
            return None
        return target

    def _write(
        self,
        src: IO[bytes],
        target: Path,
        mode: int,
        written: list[Path],
        created: list[Path],
    ) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        existed = target.exists()
        staging = target.with_name(f".{target.name}{_STAGING_SUFFIX}")
        try:
            with src, open(staging, "wb") as dst:
                shutil.copyfileobj(src, dst)
            if mode:
                os.chmod(staging, mode)
            os.replace(staging, target)
        finally:
            staging.unlink(missing_ok=True)

        if target not in written:
            written.append(target)
        if not existed and target not in created:
            created.append(target)

    def _extract_tar(
        self,
        archive: Path,
        dest: Path,
        strip: int,
        mode: str,
        written: list[Path],
        created: list[Path],
    ) -> None:
        with tarfile.open(archive, mode) as tar:
            for member in tar:
                # Skip directories and non-regular entries (symlink, hardlink, device, fifo)
                if not member.isreg():
                    continue

                target = self._target(dest, member.name, strip)
                if target is None:
                    continue

                src = tar.extractfile(member)
                if src is None:
                    continue

                self._write(src, target, member.mode & 0o777, written, created)

    def _extract_zip(
        self,
        archive: Path,
        dest: Path,
        strip: int,
        written: list[Path],
        created: list[Path],
    ) -> None:
        with zipfile.ZipFile(archive, "r") as zf:
            for info in zf.infolist():
                if info.is_dir():
                    continue

                unix_attrs = info.external_attr >> 16
                if stat.S_IFMT(unix_attrs) == stat.S_IFLNK:
                    continue

                target = self._target(dest, info.filename, strip)
                if target is None:
                    continue

                self._write(zf.open(info), target, unix_attrs & 0o777, written, created)
