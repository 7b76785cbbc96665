"""Background tasks and the messages they post back to the coordinator.

Each task runs on its own daemon thread and reports exactly one message into
a shared queue. Only the coordinator's thread reads from that queue.
"""

from __future__ import annotations

import logging
import queue
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Protocol, Union

from .models import VideoSummary
from .thumbs import CacheDirectoryError, DecodeError, ThumbnailCache, read_image_size

logger = logging.getLogger(__name__)

Starter = Callable[[Callable[[], None]], None]


class Searcher(Protocol):
    def search(self, query: str) -> list[VideoSummary]: ...


@dataclass(frozen=True)
class SearchResult:
    query: str
    videos: list[VideoSummary] | None
    error: str | None = None


@dataclass(frozen=True)
class ThumbnailResult:
    generation: int
    index: int
    path: Path | None
    size: tuple[int, int] | None = None
    error: str | None = None
    cache_unavailable: bool = False


WorkerMessage = Union[SearchResult, ThumbnailResult]


def run_search_task(searcher: Searcher, query: str) -> SearchResult:
    try:
        videos = searcher.search(query)
    except Exception as exc:
        logger.warning("search for %r failed: %s", query, exc)
        return SearchResult(query=query, videos=None, error=str(exc) or "Search failed")
    return SearchResult(query=query, videos=videos)


def run_thumbnail_task(
    cache: ThumbnailCache,
    generation: int,
    index: int,
    url: str,
) -> ThumbnailResult:
    try:
        path = cache.fetch(url)
    except Exception as exc:
        logger.warning("thumbnail %s failed: %s", url, exc)
        return ThumbnailResult(
            generation=generation,
            index=index,
            path=None,
            error=str(exc) or "Thumbnail download failed",
            cache_unavailable=isinstance(exc, CacheDirectoryError),
        )
    try:
        size = read_image_size(path)
    except DecodeError as exc:
        logger.info("%s; using default aspect ratio", exc)
        size = None
    return ThumbnailResult(generation=generation, index=index, path=path, size=size)


class TaskRunner:
    """Spawns search and thumbnail tasks and collects their messages."""

    def __init__(
        self,
        searcher: Searcher,
        cache: ThumbnailCache,
        starter: Starter | None = None,
    ) -> None:
        self._searcher = searcher
        self._cache = cache
        self._start = starter or _start_thread
        self._messages: queue.Queue[WorkerMessage] = queue.Queue()

    def spawn_search(self, query: str) -> None:
        def task() -> None:
            self._messages.put(run_search_task(self._searcher, query))

        self._start(task)

    def spawn_thumbnail(self, generation: int, index: int, url: str) -> None:
        def task() -> None:
            self._messages.put(run_thumbnail_task(self._cache, generation, index, url))

        self._start(task)

    def drain(self) -> list[WorkerMessage]:
        messages: list[WorkerMessage] = []
        while True:
            try:
                messages.append(self._messages.get_nowait())
            except queue.Empty:
                return messages


def _start_thread(target: Callable[[], None]) -> None:
    threading.Thread(target=target, daemon=True).start()
