"""Source fetching: download, then extract or place the file.

`Fetcher.fetch` handles one URL. `Fetcher.fetch_all` downloads several URLs
concurrently and either returns every result or, if any fetch fails, removes
the files the others created and returns the failure. Files that already
existed and were overwritten keep their new content.
"""

from __future__ import annotations

import os
import shutil
import tempfile
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Protocol

from binwrap.core.errors import DownloadFailed, PathTraversal
from binwrap.core.result import Err, Ok, Result
from binwrap.fetch.extract import ExtractError, Extractor, archive_format
from binwrap.fetch.http import HttpClient, HttpError, RealHttpClient
from binwrap.platform.files import remove_files
from binwrap.platform.paths import guard
from binwrap.sources import url_filename

__all__ = [
    "Fetcher",
    "FetchResult",
    "FetchError",
    "FetchObserver",
    "NullObserver",
    "MAX_WORKERS",
]

MAX_WORKERS = 8

type FetchError = HttpError | ExtractError | PathTraversal


@dataclass(frozen=True, slots=True)
class FetchResult:
    """Files written by fetching one URL.

    Attributes:
        url: Source URL
        paths: Files written into the destination directory
        extracted: True if the download was an archive that got extracted
        created: The subset of paths that did not exist before the fetch
    """

    url: str
    paths: tuple[Path, ...]
    extracted: bool
    created: tuple[Path, ...] = ()


class FetchObserver(Protocol):
    """Receives progress notifications. Called from worker threads."""

    def fetch_started(self, url: str) -> None: ...

    def fetch_progress(self, url: str, downloaded: int, total: int) -> None: ...

    def fetch_finished(self, url: str, ok: bool) -> None: ...


class NullObserver:
    """Observer that ignores all notifications."""

    def fetch_started(self, url: str) -> None:
        return None

    def fetch_progress(self, url: str, downloaded: int, total: int) -> None:
        return None

    def fetch_finished(self, url: str, ok: bool) -> None:
        return None


class Fetcher:
    """Downloads sources into a destination directory.

    Usage:
        fetcher = Fetcher(RealHttpClient())
        result = fetcher.fetch_all(urls, dest, strip=1)
        if is_ok(result):
            for fetched in result.value:
                print(fetched.url, fetched.paths)
    """

    def __init__(
        self,
        http: HttpClient | None = None,
        *,
        extractor: Extractor | None = None,
        observer: FetchObserver | None = None,
        max_workers: int = MAX_WORKERS,
    ) -> None:
        self._http = http if http is not None else RealHttpClient()
        self._extractor = extractor if extractor is not None else Extractor()
        self._observer = observer if observer is not None else NullObserver()
        self._max_workers = max(1, max_workers)

    def fetch(
        self,
        url: str,
        dest: Path,
        *,
        extract: bool = True,
        strip: int = 0,
    ) -> Result[FetchResult, FetchError]:
        """Fetch one URL into dest.

        Args:
            url: Source URL
            dest: Destination directory (created if missing)
            extract: Extract recognized archives instead of saving them as-is
            strip: Leading path components to drop from archive entries

        Returns:
            Ok with FetchResult, or Err with the HTTP/extraction/path error
        """
        self._observer.fetch_started(url)
        result = self._fetch(url, dest, extract=extract, strip=strip)
        self._observer.fetch_finished(url, isinstance(result, Ok))
        return result

    def _fetch(
        self, url: str, dest: Path, *, extract: bool, strip: int
    ) -> Result[FetchResult, FetchError]:
        filename = url_filename(url)

        def on_progress(downloaded: int, total: int) -> None:
            self._observer.fetch_progress(url, downloaded, total)

        with tempfile.TemporaryDirectory(prefix="binwrap-") as tmp:
            download_path = Path(tmp) / filename
            downloaded = self._http.download(url, download_path, progress=on_progress)
            if isinstance(downloaded, Err):
                return downloaded

            if extract and archive_format(download_path) is not None:
                extracted = self._extractor.extract(download_path, dest, strip=strip)
                if isinstance(extracted, Err):
                    return extracted
                return Ok(
                    FetchResult(
                        url=url,
                        paths=extracted.value.paths,
                        extracted=True,
                        created=extracted.value.created,
                    )
                )

            target = guard(dest, dest / filename)
            if isinstance(target, Err):
                return target
            return self._place(url, download_path, target.value)

    def _place(self, url: str, download_path: Path, target: Path) -> Result[FetchResult, FetchError]:
        # Moves may cross filesystems; stage next to the target, then rename.
        staging = target.with_name(f".{target.name}.binwrap-part")
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            existed = target.exists()
            shutil.move(download_path, staging)
            os.replace(staging, target)
        except OSError as e:
            return Err(ExtractError(archive=download_path, message=f"Could not write {target}: {e}"))
        finally:
            staging.unlink(missing_ok=True)

        created = () if existed else (target,)
        return Ok(FetchResult(url=url, paths=(target,), extracted=False, created=created))

    def fetch_all(
        self,
        urls: Sequence[str],
        dest: Path,
        *,
        extract: bool = True,
        strip: int = 0,
    ) -> Result[list[FetchResult], DownloadFailed]:
        """Fetch every URL concurrently and wait for all of them.

        All-or-nothing: if any fetch fails, files created by the successful
        ones are removed and the first failure (in `urls` order) is returned.
        Pre-existing files they overwrote are left in place.

        Returns:
            Ok with one FetchResult per URL (same order), or Err with DownloadFailed
        """
        if not urls:
            return Ok([])

        workers = min(len(urls), self._max_workers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="binwrap-fetch") as pool:
            futures = [
                pool.submit(self.fetch, url, dest, extract=extract, strip=strip) for url in urls
            ]
            results = [future.result() for future in futures]

        fetched: list[FetchResult] = []
        failure: DownloadFailed | None = None
        for url, result in zip(urls, results, strict=True):
            if isinstance(result, Err):
                if failure is None:
                    failure = DownloadFailed(url=url, cause=result.error)
            else:
                fetched.append(result.value)

        if failure is not None:
            remove_files([path for item in fetched for path in item.created])
            return Err(failure)
        return Ok(fetched)
