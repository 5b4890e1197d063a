"""Source descriptors and platform filtering.

A source is a download URL, optionally tagged with the operating system and
CPU architecture it is built for. Untagged sources apply everywhere.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import PurePosixPath
from urllib.parse import unquote, urlparse

from binwrap.core.errors import InvalidUrl
from binwrap.core.result import Err, Ok, Result
from binwrap.platform.detection import normalize_arch, normalize_os

__all__ = ["SourceDescriptor", "parse_source", "validate_url", "filter_sources", "url_filename"]

_ALLOWED_SCHEMES = frozenset({"http", "https"})


@dataclass(frozen=True, slots=True)
class SourceDescriptor:
    """A candidate download location.

    Attributes:
        url: Absolute http(s) URL
        os: OS the artifact is built for, or None if universal
        arch: Architecture the artifact is built for, or None if universal
    """

    url: str
    os: str | None = None
    arch: str | None = None

    def applies_to(self, os_name: str, arch: str) -> bool:
        """Check whether this source is usable on the given platform."""
        if self.os is not None and normalize_os(self.os) != normalize_os(os_name):
            return False
        if self.arch is not None and normalize_arch(self.arch) != normalize_arch(arch):
            return False
        return True


def validate_url(url: str) -> Result[str, InvalidUrl]:
    """Check that url is an absolute http(s) URL with a host."""
    if not isinstance(url, str) or not url.strip():
        return Err(InvalidUrl(url=str(url), reason="URL is empty"))

    try:
        parsed = urlparse(url.strip())
        # Accessing port validates it
        _ = parsed.port
    except ValueError as e:
        return Err(InvalidUrl(url=url, reason=str(e)))

    if parsed.scheme.lower() not in _ALLOWED_SCHEMES:
        scheme = parsed.scheme or "none"
        return Err(InvalidUrl(url=url, reason=f"unsupported scheme '{scheme}', expected http or https"))
    if not parsed.hostname:
        return Err(InvalidUrl(url=url, reason="URL has no host"))
    return Ok(url.strip())


def parse_source(
    url: str, os: str | None = None, arch: str | None = None
) -> Result[SourceDescriptor, InvalidUrl]:
    """Validate url and build a SourceDescriptor.

    Empty os/arch strings are treated as absent.
    """
    checked = validate_url(url)
    if isinstance(checked, Err):
        return checked
    return Ok(SourceDescriptor(url=checked.value, os=os or None, arch=arch or None))


def filter_sources(
    sources: Iterable[SourceDescriptor], os_name: str, arch: str
) -> list[SourceDescriptor]:
    """Return the sources applicable to os_name/arch, in their original order."""
    return [source for source in sources if source.applies_to(os_name, arch)]


def url_filename(url: str) -> str:
    """File name a non-archive download is saved as (last URL path segment)."""
    path = unquote(urlparse(url).path)
    name = PurePosixPath(path).name.replace("\\", "_")
    if name in ("", ".", ".."):
        return "download"
    return name
