"""Fluent configuration builder.

Each setter validates its input immediately and returns the wrapper, so a
host tool can describe its binary in one expression:

    bin = (
        BinWrapper()
        .src("https://example.com/gifsicle-linux.tar.gz", "linux", "x64")
        .src("https://example.com/gifsicle-darwin.tar.gz", "darwin")
        .dest(vendor_dir)
        .use("gifsicle")
        .version(">=1.71")
    )
    result = bin.run()

Calling a setter without arguments returns the current value. `run()` freezes
the accumulated settings into a `Configuration` and executes the pipeline.
"""

from __future__ import annotations

from collections.abc import Sequence
from pathlib import Path
from typing import Any, Self, overload

from binwrap.core.config import DEFAULT_STRIP, Configuration
from binwrap.core.errors import BinError, InvalidConfiguration
from binwrap.core.result import Err, Result
from binwrap.fetch.fetcher import Fetcher, FetchObserver
from binwrap.fetch.http import HttpClient
from binwrap.output.console import ConsoleProtocol
from binwrap.pipeline import AcquisitionPipeline
from binwrap.platform.detection import PlatformInfo
from binwrap.platform.paths import locate
from binwrap.semver import parse_range
from binwrap.sources import SourceDescriptor, parse_source
from binwrap.verify import Verifier

__all__ = ["BinWrapper"]


class BinWrapper:
    """Describes a binary to download, and ensures it is available.

    Args:
        strip: Leading path components dropped from archive entries
        skip_check: Do not run the binary after acquiring it
        http: HTTP client (default: urllib-based RealHttpClient)
        observer: Receives download progress notifications
        console: Receives pipeline status messages (default: silent)
        platform: Platform to select sources for (default: detected)
        verifier: Runs probe/version checks (default: subprocess-based)
    """

    def __init__(
        self,
        *,
        strip: int = DEFAULT_STRIP,
        skip_check: bool = False,
        http: HttpClient | None = None,
        observer: FetchObserver | None = None,
        console: ConsoleProtocol | None = None,
        platform: PlatformInfo | None = None,
        verifier: Verifier | None = None,
    ) -> None:
        if strip < 0:
            raise ValueError(f"strip must be a non-negative integer: {strip!r}")
        self._sources: list[SourceDescriptor] = []
        self._dest = Path.cwd().resolve()
        self._binary = ""
        self._version_range: str | None = None
        self._strip = strip
        self._skip_check = skip_check
        self._check_args: tuple[str, ...] | None = None
        self._version_args: tuple[str, ...] | None = None

        self._http = http
        self._observer = observer
        self._console = console
        self._platform = platform
        self._verifier = verifier
        self._pipeline: AcquisitionPipeline | None = None

    @classmethod
    def from_config(cls, config: Configuration, **options: Any) -> BinWrapper:
        """Build a wrapper pre-filled from a loaded Configuration.

        Keyword options are passed to the constructor (http, console, ...).
        """
        wrapper = cls(strip=config.strip, skip_check=config.skip_check, **options)
        wrapper._sources = list(config.sources)
        wrapper._dest = config.dest
        wrapper._binary = config.binary
        wrapper._version_range = config.version_range
        wrapper._check_args = config.check_args
        wrapper._version_args = config.version_args
        return wrapper

    @overload
    def src(self) -> tuple[SourceDescriptor, ...]: ...

    @overload
    def src(self, url: str, os: str | None = None, arch: str | None = None) -> Self: ...

    def src(
        self, url: str | None = None, os: str | None = None, arch: str | None = None
    ) -> tuple[SourceDescriptor, ...] | Self:
        """Add a source, optionally restricted to an OS and architecture.

        Raises:
            InvalidConfiguration: url is not an absolute http(s) URL
        """
        if url is None:
            return tuple(self._sources)
        parsed = parse_source(url, os, arch)
        if isinstance(parsed, Err):
            raise InvalidConfiguration(parsed.error)
        self._sources.append(parsed.value)
        return self

    @overload
    def dest(self) -> Path: ...

    @overload
    def dest(self, path: str | Path) -> Self: ...

    def dest(self, path: str | Path | None = None) -> Path | Self:
        """Set the directory the binary is downloaded to (stored canonical)."""
        if path is None:
            return self._dest
        self._dest = Path(path).expanduser().resolve()
        return self

    @overload
    def use(self) -> str: ...

    @overload
    def use(self, name: str) -> Self: ...

    def use(self, name: str | None = None) -> str | Self:
        """Set the file name of the binary inside the destination."""
        if name is None:
            return self._binary
        if not name:
            raise ValueError("binary name cannot be empty")
        self._binary = name
        return self

    @overload
    def version(self) -> str | None: ...

    @overload
    def version(self, version_range: str) -> Self: ...

    def version(self, version_range: str | None = None) -> str | None | Self:
        """Set the version range the binary must satisfy.

        Raises:
            InvalidConfiguration: the range cannot be parsed
        """
        if version_range is None:
            return self._version_range
        parsed = parse_range(version_range)
        if isinstance(parsed, Err):
            raise InvalidConfiguration(parsed.error)
        self._version_range = version_range
        return self

    def check_args(self, *args: str) -> Self:
        """Set the arguments used to probe that the binary runs."""
        self._check_args = tuple(args)
        return self

    def version_args(self, *args: str) -> Self:
        """Set the arguments that make the binary print its version."""
        self._version_args = tuple(args)
        return self

    def path(self) -> Path:
        """Resolved path of the binary.

        Raises:
            InvalidConfiguration: the binary name escapes the destination
        """
        located = locate(self._dest, self._binary)
        if isinstance(located, Err):
            raise InvalidConfiguration(located.error)
        return located.value

    def config(self) -> Configuration:
        """Freeze the current settings."""
        if not self._binary:
            raise ValueError("no binary name set, call use() first")
        defaults = Configuration()
        return Configuration(
            sources=tuple(self._sources),
            dest=self._dest,
            binary=self._binary,
            version_range=self._version_range,
            strip=self._strip,
            skip_check=self._skip_check,
            check_args=self._check_args if self._check_args is not None else defaults.check_args,
            version_args=(
                self._version_args if self._version_args is not None else defaults.version_args
            ),
        )

    @property
    def pipeline(self) -> AcquisitionPipeline | None:
        """Pipeline used by the most recent run(), for inspecting its states."""
        return self._pipeline

    def run(self, cmd: Sequence[str] | None = None) -> Result[Path, BinError]:
        """Ensure the binary is available, then verify it.

        Args:
            cmd: Probe arguments (default: the configured check_args)

        Returns:
            Ok with the binary path, or Err with the failure
        """
        fetcher = Fetcher(self._http, observer=self._observer)
        self._pipeline = AcquisitionPipeline(
            self.config(),
            fetcher=fetcher,
            verifier=self._verifier,
            platform=self._platform,
            console=self._console,
        )
        return self._pipeline.run(cmd)
