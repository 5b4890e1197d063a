"""Download progress rendering with rich.

RichProgressObserver implements the fetcher's FetchObserver protocol and
draws one bar per source URL. Use it as a context manager around the run:

    with RichProgressObserver() as observer:
        BinWrapper(observer=observer).src(url).dest(d).use("tool").run()
"""

from __future__ import annotations

import threading
from pathlib import PurePosixPath
from types import TracebackType
from typing import TYPE_CHECKING
from urllib.parse import urlparse

from rich.progress import (
    BarColumn,
    DownloadColumn,
    Progress,
    TaskID,
    TextColumn,
    TimeRemainingColumn,
    TransferSpeedColumn,
)

if TYPE_CHECKING:
    from rich.console import Console

__all__ = ["RichProgressObserver"]


def _label(url: str) -> str:
    return PurePosixPath(urlparse(url).path).name or url


class RichProgressObserver:
    """FetchObserver that renders rich progress bars.

    Notifications arrive from fetcher worker threads; task bookkeeping is
    guarded by a lock, rich's Progress handles its own locking.
    """

    def __init__(self, console: Console | None = None, *, disable: bool = False) -> None:
        self._progress = Progress(
            TextColumn("  {task.description}: downloading"),
            BarColumn(bar_width=20),
            DownloadColumn(),
            TransferSpeedColumn(),
            TimeRemainingColumn(),
            console=console,
            disable=disable,
        )
        self._tasks: dict[str, TaskID] = {}
        self._received: dict[str, int] = {}
        self._lock = threading.Lock()

    def __enter__(self) -> RichProgressObserver:
        self._progress.start()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self._progress.stop()

    def fetch_started(self, url: str) -> None:
        with self._lock:
            self._tasks[url] = self._progress.add_task(_label(url), total=None)

    def fetch_progress(self, url: str, downloaded: int, total: int) -> None:
        with self._lock:
            task = self._tasks.get(url)
            self._received[url] = downloaded
        if task is None:
            return
        self._progress.update(task, completed=downloaded, total=total or None)

    def fetch_finished(self, url: str, ok: bool) -> None:
        with self._lock:
            task = self._tasks.get(url)
            total = self._received.get(url, 0)
        if task is None:
            return
        if ok:
            self._progress.update(task, total=total, completed=total)
        else:
            self._progress.update(task, description=f"{_label(url)} [red](failed)[/red]")
