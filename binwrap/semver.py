"""Semantic version ranges.

Ranges use the npm-style syntax tools publishing native binaries commonly
document (``>=1.71``, ``^2.0.0``, ``~1.2``, ``1.x``, ``1.2 - 2.3``,
``<2 || >=3``) and are evaluated with `packaging.specifiers`. Each ``||``
alternative becomes one SpecifierSet; a version satisfies the range when it
is contained in any of them.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from packaging.specifiers import InvalidSpecifier, SpecifierSet
from packaging.version import InvalidVersion, Version

from binwrap.core.errors import InvalidVersionRange
from binwrap.core.result import Err, Ok, Result

__all__ = [
    "VersionRange",
    "parse_range",
    "valid_range",
    "satisfies",
    "find_version",
]

_HYPHEN_RE = re.compile(r"^\s*(\S+)\s+-\s+(\S+)\s*$")
_OP_SPACE_RE = re.compile(r"(>=|<=|>|<|=|\^|~)\s+")
_COMPARATOR_RE = re.compile(r"^(>=|<=|>|<|=|\^|~)?v?(.+)$")
_PARTIAL_RE = re.compile(
    r"^(?P<major>\d+|[xX*])"
    r"(?:\.(?P<minor>\d+|[xX*]))?"
    r"(?:\.(?P<patch>\d+|[xX*]))?"
    r"(?:-(?P<pre>[0-9A-Za-z.-]+))?"
    r"(?:\+[0-9A-Za-z.-]+)?$"
)
_VERSION_IN_TEXT_RE = re.compile(r"(?<![\d.])v?(\d+\.\d+(?:\.\d+)?(?:-[0-9A-Za-z.]+)?)")

_NOTHING = "<0.0.0a0"


@dataclass(frozen=True, slots=True)
class _Partial:
    major: int | None
    minor: int | None
    patch: int | None
    pre: str | None

    @property
    def is_full(self) -> bool:
        return self.major is not None and self.minor is not None and self.patch is not None

    def floor(self) -> str:
        """Version with missing parts zero-filled."""
        base = f"{self.major or 0}.{self.minor or 0}.{self.patch or 0}"
        return f"{base}-{self.pre}" if self.pre and self.is_full else base

    def next_major(self) -> str:
        return f"{(self.major or 0) + 1}.0.0"

    def next_minor(self) -> str:
        return f"{self.major or 0}.{(self.minor or 0) + 1}.0"

    def next_patch(self) -> str:
        return f"{self.major or 0}.{self.minor or 0}.{(self.patch or 0) + 1}"

    def next_after_missing(self) -> str:
        """First version above everything this partial covers."""
        if self.minor is None:
            return self.next_major()
        return self.next_minor()


@dataclass(frozen=True, slots=True)
class VersionRange:
    """A parsed range. `text` keeps the caller's original spelling."""

    text: str
    alternatives: tuple[SpecifierSet, ...]

    def contains(self, version: str | Version) -> bool:
        if not isinstance(version, Version):
            try:
                version = Version(version)
            except InvalidVersion:
                return False
        return any(version in spec for spec in self.alternatives)

    def __str__(self) -> str:
        return self.text


def _wild(part: str | None) -> int | None:
    if part is None or part in ("x", "X", "*"):
        return None
    return int(part)


def _parse_partial(text: str) -> _Partial | None:
    m = _PARTIAL_RE.match(text)
    if m is None:
        return None
    major = _wild(m.group("major"))
    minor = _wild(m.group("minor")) if major is not None else None
    patch = _wild(m.group("patch")) if minor is not None else None
    return _Partial(major, minor, patch, m.group("pre"))


def _pep440(version: str) -> str:
    """Normalize a semver string to PEP 440 ("1.0.0-beta.1" -> "1.0.0b1")."""
    return str(Version(version))


def _comparator(op: str, p: _Partial) -> list[str]:
    """Translate one comparator into PEP 440 specifier strings."""
    if p.major is None:
        # "*", ">=x", "<=*" match anything; "<*" and ">*" match nothing
        return [_NOTHING] if op in ("<", ">") else []

    floor = _pep440(p.floor())
    match op:
        case "" | "=":
            if p.is_full:
                return [f"=={floor}"]
            return [f">={floor}", f"<{p.next_after_missing()}"]
        case ">=":
            return [f">={floor}"]
        case ">":
            if p.is_full:
                return [f">{floor}"]
            return [f">={p.next_after_missing()}"]
        case "<":
            return [f"<{floor}"]
        case "<=":
            if p.is_full:
                return [f"<={floor}"]
            return [f"<{p.next_after_missing()}"]
        case "~":
            upper = p.next_major() if p.minor is None else p.next_minor()
            return [f">={floor}", f"<{upper}"]
        case "^":
            if p.major > 0 or p.minor is None:
                upper = p.next_major()
            elif p.minor > 0 or p.patch is None:
                upper = p.next_minor()
            else:
                upper = p.next_patch()
            return [f">={floor}", f"<{upper}"]
        case _:
            raise AssertionError(f"unexpected operator: {op}")


def _parse_alternative(text: str) -> SpecifierSet | str:
    """Parse one ``||`` branch. Returns the reason string on failure."""
    hyphen = _HYPHEN_RE.match(text)
    if hyphen is not None:
        low = _parse_partial(hyphen.group(1).lstrip("v"))
        high = _parse_partial(hyphen.group(2).lstrip("v"))
        if low is None or high is None:
            return f"invalid hyphen range '{text.strip()}'"
        specs = _comparator(">=", low) + _comparator("<=", high)
        return SpecifierSet(",".join(specs))

    tokens = [t for t in re.split(r"[\s,]+", _OP_SPACE_RE.sub(r"\1", text)) if t]
    specs: list[str] = []
    for token in tokens:
        m = _COMPARATOR_RE.match(token)
        partial = _parse_partial(m.group(2)) if m else None
        if m is None or partial is None:
            return f"invalid comparator '{token}'"
        specs.extend(_comparator(m.group(1) or "", partial))
    return SpecifierSet(",".join(specs))


def parse_range(text: str) -> Result[VersionRange, InvalidVersionRange]:
    """Parse a version range.

    Args:
        text: Range such as ">=1.71" or "^2.0.0 || ~3.1"

    Returns:
        Ok with VersionRange, or Err with InvalidVersionRange
    """
    if not isinstance(text, str):
        return Err(InvalidVersionRange(range=str(text), reason="range must be a string"))

    alternatives: list[SpecifierSet] = []
    for branch in text.split("||"):
        try:
            parsed = _parse_alternative(branch)
        except (InvalidVersion, InvalidSpecifier) as e:
            return Err(InvalidVersionRange(range=text, reason=str(e)))
        if isinstance(parsed, str):
            return Err(InvalidVersionRange(range=text, reason=parsed))
        alternatives.append(parsed)

    return Ok(VersionRange(text=text, alternatives=tuple(alternatives)))


def valid_range(text: str) -> bool:
    return isinstance(parse_range(text), Ok)


def satisfies(version: str, text: str) -> bool:
    """Check version against a range. Invalid ranges satisfy nothing."""
    parsed = parse_range(text)
    if isinstance(parsed, Err):
        return False
    return parsed.value.contains(version)


def find_version(output: str) -> str | None:
    """Return the first version-looking token in a program's output.

    Example: find_version("gifsicle 1.92\\nCopyright ...") -> "1.92"
    """
    for m in _VERSION_IN_TEXT_RE.finditer(output):
        candidate = m.group(1)
        for text in (candidate, candidate.split("-", 1)[0]):
            try:
                Version(text)
            except InvalidVersion:
                continue
            return text
    return None
