"""Path containment checks for the destination directory.

Every path the pipeline reads, executes or chmods is first passed through
`guard` with the destination directory as root, so a crafted binary name or
archive entry such as ``../../etc/passwd`` cannot reach outside it.
"""

from __future__ import annotations

from pathlib import Path

from binwrap.core.errors import PathTraversal
from binwrap.core.result import Err, Ok, Result

__all__ = ["guard", "is_within", "locate"]


def _canonical(path: Path) -> Path:
    return Path(path).expanduser().resolve()


def is_within(root: Path, candidate: Path) -> bool:
    """Check whether candidate resolves to root or somewhere below it."""
    try:
        return _canonical(candidate).is_relative_to(_canonical(root))
    except OSError:
        return False


def guard(root: Path, candidate: Path) -> Result[Path, PathTraversal]:
    """Return the canonical form of candidate if it stays under root.

    Args:
        root: Directory the candidate must live in
        candidate: Path to check (absolute, or relative to the cwd)

    Returns:
        Ok with the canonical candidate path, or Err with PathTraversal
    """
    try:
        canonical_root = _canonical(root)
        canonical = _canonical(candidate)
    except OSError:
        return Err(PathTraversal(root=Path(root), candidate=Path(candidate)))

    if not canonical.is_relative_to(canonical_root):
        return Err(PathTraversal(root=canonical_root, candidate=canonical))
    return Ok(canonical)


def locate(dest: Path, binary: str) -> Result[Path, PathTraversal]:
    """Resolve where the binary is expected to live.

    Example: locate(Path("vendor"), "gifsicle") -> Ok(<cwd>/vendor/gifsicle)
    """
    return guard(dest, Path(dest) / binary)
