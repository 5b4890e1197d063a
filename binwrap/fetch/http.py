"""HTTP transport for source downloads.

This module provides:
- HttpClient: Protocol for downloads (injectable for tests)
- RealHttpClient: Real implementation using urllib
- MockHttpClient: Mock implementation for testing
"""

from __future__ import annotations

import ssl
import threading
import urllib.error
import urllib.request
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Protocol, runtime_checkable

from binwrap import __version__
from binwrap.core.result import Err, Ok, Result

if TYPE_CHECKING:
    from collections.abc import Callable

__all__ = [
    "HttpClient",
    "RealHttpClient",
    "MockHttpClient",
    "HttpError",
    "ProgressCallback",
]

type ProgressCallback = Callable[[int, int], None]


@dataclass(frozen=True, slots=True)
class HttpError:
    """HTTP error details.

    Attributes:
        url: The URL that failed
        status: HTTP status code (0 for network errors)
        message: Human-readable error message
    """

    url: str
    status: int
    message: str

    def __str__(self) -> str:
        if self.status:
            return f"HTTP {self.status}: {self.message} ({self.url})"
        return f"{self.message} ({self.url})"


@runtime_checkable
class HttpClient(Protocol):
    """Protocol for HTTP downloads.

    Implementations must be safe to call from several threads at once; the
    fetcher downloads all sources concurrently.
    """

    def download(
        self,
        url: str,
        dest: Path,
        progress: ProgressCallback | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to file.

        Args:
            url: URL to download
            dest: Destination path
            progress: Optional callback(downloaded, total); total is 0 when unknown

        Returns:
            Ok with dest path, or Err with HttpError
        """
        ...


class RealHttpClient:
    """HTTP client using urllib.

    Handles:
    - HTTPS with system certificates
    - Redirects (urllib follows them)
    - Download with progress callback
    - Timeout handling
    """

    def __init__(
        self,
        timeout: float = 30.0,
        user_agent: str = f"binwrap/{__version__}",
        chunk_size: int = 64 * 1024,
    ) -> None:
        self.timeout = timeout
        self.user_agent = user_agent
        self.chunk_size = chunk_size
        self._ssl_context = ssl.create_default_context()

    def download(
        self,
        url: str,
        dest: Path,
        progress: ProgressCallback | None = None,
    ) -> Result[Path, HttpError]:
        """Download URL to file with optional progress callback."""
        try:
            req = urllib.request.Request(url, headers={"User-Agent": self.user_agent})
            with urllib.request.urlopen(
                req,
                timeout=self.timeout,
                context=self._ssl_context,
            ) as response:
                total = int(response.headers.get("Content-Length") or 0)
                downloaded = 0

                dest.parent.mkdir(parents=True, exist_ok=True)
                with open(dest, "wb") as f:
                    while True:
                        chunk = response.read(self.chunk_size)
                        if not chunk:
                            break
                        f.write(chunk)
                        downloaded += len(chunk)
                        if progress:
                            progress(downloaded, total)

                return Ok(dest)

        except urllib.error.HTTPError as e:
            return Err(HttpError(url=url, status=e.code, message=str(e.reason)))
        except urllib.error.URLError as e:
            return Err(HttpError(url=url, status=0, message=str(e.reason)))
        except TimeoutError:
            return Err(HttpError(url=url, status=0, message="Download timed out"))
        except ValueError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))
        except OSError as e:
            return Err(HttpError(url=url, status=0, message=str(e)))


class MockHttpClient:
    """Mock HTTP client for testing.

    Usage:
        client = MockHttpClient()
        client.set_download("https://example.com/tool.tar.gz", archive_bytes)
        fetcher = Fetcher(client)
    """

    def __init__(self) -> None:
        self._responses: dict[str, bytes | HttpError] = {}
        self._lock = threading.Lock()
        self.calls: list[str] = []

    def set_download(self, url: str, response: bytes | HttpError) -> None:
        """Set download content (or failure) for URL."""
        self._responses[url] = response

    def set_file(self, url: str, path: Path) -> None:
        """Serve the bytes of a local file for URL."""
        self._responses[url] = path.read_bytes()

    def download(
        self,
        url: str,
        dest: Path,
        progress: ProgressCallback | None = None,
    ) -> Result[Path, HttpError]:
        """Mock download: writes the predefined content to dest."""
        with self._lock:
            self.calls.append(url)

        if url not in self._responses:
            return Err(HttpError(url=url, status=404, message="Not found (mock)"))

        response = self._responses[url]
        if isinstance(response, HttpError):
            return Err(response)

        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(response)

        if progress:
            progress(len(response), len(response))

        return Ok(dest)
