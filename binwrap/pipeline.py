"""The acquisition pipeline.

States::

    IDLE -> CHECKING -> FOUND -----------------------------> READY
                     -> DOWNLOADING -> NORMALIZING -------> READY
             (any step) ---------------------------------> FAILED

CHECKING looks for the binary at its resolved path. Only an executable file
counts as FOUND; otherwise the configured sources are filtered for the
current platform and fetched concurrently into the destination, then every
fetched file is made executable. The binary must be among them. Verification
runs after READY unless disabled.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import Enum, auto
from pathlib import Path

from binwrap.core.config import Configuration
from binwrap.core.errors import AcquisitionError, BinError, NoMatchingBinary
from binwrap.core.result import Err, Ok, Result
from binwrap.fetch.fetcher import Fetcher
from binwrap.output.console import ConsoleProtocol, QuietConsole, Style
from binwrap.platform.detection import PlatformInfo, detect
from binwrap.platform.files import exists, is_executable, make_executable
from binwrap.platform.paths import guard, locate
from binwrap.sources import filter_sources
from binwrap.verify import Verifier

__all__ = ["AcquisitionPipeline", "PipelineState"]


class PipelineState(Enum):
    IDLE = auto()
    CHECKING = auto()
    FOUND = auto()
    DOWNLOADING = auto()
    NORMALIZING = auto()
    READY = auto()
    FAILED = auto()

    def __str__(self) -> str:
        return self.name.lower()


class AcquisitionPipeline:
    """Ensures the configured binary is present, executable and working.

    Usage:
        pipeline = AcquisitionPipeline(config, fetcher=Fetcher(http))
        match pipeline.run():
            case Ok(path):
                subprocess.run([str(path), ...])
            case Err(error):
                print_bin_error(error, console)
    """

    def __init__(
        self,
        config: Configuration,
        *,
        fetcher: Fetcher | None = None,
        verifier: Verifier | None = None,
        platform: PlatformInfo | None = None,
        console: ConsoleProtocol | None = None,
    ) -> None:
        self._config = config
        self._fetcher = fetcher if fetcher is not None else Fetcher()
        self._verifier = verifier if verifier is not None else Verifier()
        self._platform = platform if platform is not None else detect()
        self._console = console if console is not None else QuietConsole()
        self._history: list[PipelineState] = [PipelineState.IDLE]

    @property
    def config(self) -> Configuration:
        return self._config

    @property
    def state(self) -> PipelineState:
        return self._history[-1]

    @property
    def history(self) -> tuple[PipelineState, ...]:
        """States visited by the most recent run, starting at IDLE."""
        return tuple(self._history)

    def _enter(self, state: PipelineState) -> None:
        self._history.append(state)

    def _fail[T](self, error: BinError) -> Result[T, BinError]:
        self._enter(PipelineState.FAILED)
        return Err(error)

    def acquire(self) -> Result[Path, AcquisitionError]:
        """Make sure the binary exists and is executable.

        Returns:
            Ok with the resolved binary path, or Err with the failure
        """
        config = self._config
        self._history = [PipelineState.IDLE]
        self._enter(PipelineState.CHECKING)

        located = locate(config.dest, config.binary)
        if isinstance(located, Err):
            return self._fail(located.error)
        binary = located.value

        present = exists(binary)
        if isinstance(present, Err):
            return self._fail(present.error)
        if present.value and is_executable(binary):
            self._enter(PipelineState.FOUND)
            self._enter(PipelineState.READY)
            self._console.print(f"{config.binary}: found at {binary}", Style.DIM)
            return Ok(binary)
        if present.value:
            self._console.warning(f"{config.binary}: {binary} is not executable, fetching again")

        self._enter(PipelineState.DOWNLOADING)
        os_name, arch = self._platform.os_name, self._platform.arch_name
        sources = filter_sources(config.sources, os_name, arch)
        if not sources:
            return self._fail(NoMatchingBinary(os_name=os_name, arch=arch, path=binary))

        self._console.info(f"{config.binary}: downloading {len(sources)} source(s)")
        fetched = self._fetcher.fetch_all(
            [source.url for source in sources],
            config.dest,
            extract=True,
            strip=config.strip,
        )
        if isinstance(fetched, Err):
            return self._fail(fetched.error)

        self._enter(PipelineState.NORMALIZING)
        for item in fetched.value:
            for path in item.paths:
                safe = guard(config.dest, path)
                if isinstance(safe, Err):
                    return self._fail(safe.error)
                changed = make_executable(safe.value)
                if isinstance(changed, Err):
                    return self._fail(changed.error)

        landed = exists(binary)
        if isinstance(landed, Err):
            return self._fail(landed.error)
        if not landed.value or not is_executable(binary):
            return self._fail(NoMatchingBinary(os_name=os_name, arch=arch, path=binary))

        self._enter(PipelineState.READY)
        self._console.print(f"{config.binary}: ready at {binary}", Style.DIM)
        return Ok(binary)

    def run(self, check_args: Sequence[str] | None = None) -> Result[Path, BinError]:
        """Acquire the binary, then verify it unless skip_check is set.

        Args:
            check_args: Probe arguments; defaults to the configured check_args

        Returns:
            Ok with the resolved binary path, or Err with the failure
        """
        acquired = self.acquire()
        if isinstance(acquired, Err):
            return acquired

        config = self._config
        if config.skip_check:
            return acquired

        binary = acquired.value
        args = tuple(check_args) if check_args is not None else config.check_args
        verified = self._verifier.verify(
            binary,
            args,
            version_range=config.version_range,
            version_args=config.version_args,
        )
        if isinstance(verified, Err):
            return self._fail(verified.error)

        if verified.value is not None:
            self._console.success(f"{config.binary} {verified.value} satisfies {config.version_range}")
        return acquired
