"""Download and extraction of binary sources.

- HTTP transport (http.py)
- Archive extraction (extract.py)
- Concurrent fetch orchestration (fetcher.py)
"""

from binwrap.fetch.extract import ExtractError, Extraction, Extractor, archive_format
from binwrap.fetch.fetcher import (
    Fetcher,
    FetchError,
    FetchObserver,
    FetchResult,
    NullObserver,
)
from binwrap.fetch.http import HttpClient, HttpError, MockHttpClient, RealHttpClient

__all__ = [
    # HTTP
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # Extraction
    "Extractor",
    "ExtractError",
    "Extraction",
    "archive_format",
    # Fetching
    "Fetcher",
    "FetchError",
    "FetchObserver",
    "FetchResult",
    "NullObserver",
]
