import io
import time
from pathlib import Path

from PIL import Image

from ytbv.models import VideoSummary
from ytbv.search import SearchError
from ytbv.thumbs import DownloadError, ThumbnailCache
from ytbv.workers import (
    SearchResult,
    TaskRunner,
    ThumbnailResult,
    run_search_task,
    run_thumbnail_task,
)


class FakeSearcher:
    def __init__(self, videos: list[VideoSummary] | None = None, error: str | None = None):
        self.videos = videos or []
        self.error = error
        self.queries: list[str] = []

    def search(self, query: str) -> list[VideoSummary]:
        self.queries.append(query)
        if self.error:
            raise SearchError(self.error)
        return self.videos


def _png_bytes(width: int, height: int) -> bytes:
    buffer = io.BytesIO()
    Image.new("RGB", (width, height)).save(buffer, format="PNG")
    return buffer.getvalue()


def test_run_search_task_success() -> None:
    video = VideoSummary(title="A", url="https://www.youtube.com/watch?v=a")
    result = run_search_task(FakeSearcher([video]), "test")
    assert result == SearchResult(query="test", videos=[video])


def test_run_search_task_reports_error() -> None:
    result = run_search_task(FakeSearcher(error="Search failed: offline"), "test")
    assert result.videos is None
    assert result.error == "Search failed: offline"


def test_run_thumbnail_task_reads_size(tmp_path: Path) -> None:
    cache = ThumbnailCache(tmp_path, fetcher=lambda _: _png_bytes(48, 27))
    result = run_thumbnail_task(cache, 3, 1, "https://example.com/a.jpg")
    assert result.generation == 3
    assert result.index == 1
    assert result.path is not None and result.path.exists()
    assert result.size == (48, 27)
    assert result.error is None


def test_run_thumbnail_task_undecodable_image(tmp_path: Path) -> None:
    cache = ThumbnailCache(tmp_path, fetcher=lambda _: b"garbage")
    result = run_thumbnail_task(cache, 1, 0, "https://example.com/a.jpg")
    assert result.path is not None
    assert result.size is None
    assert result.error is None


def test_run_thumbnail_task_download_error(tmp_path: Path) -> None:
    def fetch(_: str) -> bytes:
        raise DownloadError("Download error: 404")

    result = run_thumbnail_task(ThumbnailCache(tmp_path, fetcher=fetch), 1, 0, "https://x/a")
    assert result.path is None
    assert result.error == "Download error: 404"
    assert result.cache_unavailable is False


def test_run_thumbnail_task_cache_dir_error(tmp_path: Path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    cache = ThumbnailCache(blocker / "thumbs", fetcher=lambda _: b"image")
    result = run_thumbnail_task(cache, 1, 0, "https://example.com/a.jpg")
    assert result.path is None
    assert result.cache_unavailable is True


def test_task_runner_posts_messages_in_order(tmp_path: Path) -> None:
    searcher = FakeSearcher([VideoSummary(title="A", url="u")])
    cache = ThumbnailCache(tmp_path, fetcher=lambda _: b"garbage")
    runner = TaskRunner(searcher, cache, starter=lambda task: task())
    runner.spawn_search("cats")
    runner.spawn_thumbnail(1, 0, "https://example.com/a.jpg")
    messages = runner.drain()
    assert isinstance(messages[0], SearchResult)
    assert isinstance(messages[1], ThumbnailResult)
    assert searcher.queries == ["cats"]
    assert runner.drain() == []


def test_task_runner_defers_to_starter(tmp_path: Path) -> None:
    started = []
    runner = TaskRunner(FakeSearcher(), ThumbnailCache(tmp_path), starter=started.append)
    runner.spawn_search("cats")
    assert len(started) == 1
    assert runner.drain() == []


def test_task_runner_collects_messages_from_threads(tmp_path: Path) -> None:
    cache = ThumbnailCache(tmp_path, fetcher=lambda url: url.encode("utf-8"))
    runner = TaskRunner(FakeSearcher(), cache)
    for index in range(3):
        runner.spawn_thumbnail(7, index, f"https://example.com/{index}.jpg")

    messages = []
    deadline = time.monotonic() + 5.0
    while len(messages) < 3 and time.monotonic() < deadline:
        messages.extend(runner.drain())
        time.sleep(0.01)

    assert sorted(message.index for message in messages) == [0, 1, 2]
    assert all(message.generation == 7 and message.path is not None for message in messages)
    assert runner.drain() == []
