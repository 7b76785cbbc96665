from __future__ import annotations

import json
import logging
import subprocess
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Callable

from .models import VideoSummary

logger = logging.getLogger(__name__)

Runner = Callable[[list[str]], subprocess.CompletedProcess[str]]

DEFAULT_SEARCH_LIMIT = 20
WATCH_URL = "https://www.youtube.com/watch?v={video_id}"


class SearchError(Exception):
    pass


class SearchService:
    """Catalog search backed by ``yt-dlp``'s ``ytsearch`` extractor."""

    def __init__(
        self,
        limit: int = DEFAULT_SEARCH_LIMIT,
        store_dir: Path | None = None,
        runner: Runner | None = None,
    ) -> None:
        self.limit = max(1, limit)
        self.store_dir = store_dir
        self._runner = runner or _run_subprocess

    def build_command(self, query: str) -> list[str]:
        command = [
            "yt-dlp",
            "--dump-json",
            "--flat-playlist",
            "--skip-download",
            "--no-warnings",
        ]
        if self.store_dir is not None:
            command += ["--cache-dir", str(self.store_dir)]
        command.append(f"ytsearch{self.limit}:{query}")
        return command

    def search(self, query: str) -> list[VideoSummary]:
        query = query.strip()
        if not query:
            raise SearchError("Empty search query")
        if self.store_dir is not None:
            try:
                self.store_dir.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise SearchError(f"Search store error: {self.store_dir} ({exc})") from exc

        command = self.build_command(query)
        logger.info("searching for %r", query)
        try:
            completed = self._runner(command)
        except FileNotFoundError as exc:
            raise SearchError("yt-dlp not found on PATH") from exc
        if completed.returncode != 0:
            raise SearchError(f"Search failed: {_summarize_error(completed)}")

        return parse_search_output(completed.stdout or "")


def parse_search_output(text: str) -> list[VideoSummary]:
    results: list[VideoSummary] = []
    for line in text.splitlines():
        line = line.strip()
        if not line:
            continue
        try:
            data = json.loads(line)
        except json.JSONDecodeError as exc:
            raise SearchError("Failed to parse search results") from exc
        if not isinstance(data, dict):
            continue
        video = video_from_entry(data)
        if video is not None:
            results.append(video)
    return results


def video_from_entry(data: dict[str, Any]) -> VideoSummary | None:
    video_id = _as_str(data.get("id"))
    if video_id is None:
        return None
    if data.get("ie_key") not in (None, "Youtube"):
        return None
    return VideoSummary(
        title=_as_str(data.get("title")) or "(untitled)",
        url=WATCH_URL.format(video_id=video_id),
        channel=_as_str(data.get("channel")) or _as_str(data.get("uploader")),
        duration=_as_nonneg_int(data.get("duration")),
        view_count=_as_nonneg_int(data.get("view_count")),
        publish_date=_publish_date(data),
        publish_date_text=None,
        thumbnail_url=_thumbnail_url(data),
    )


def _thumbnail_url(data: dict[str, Any]) -> str | None:
    thumbnails = data.get("thumbnails")
    if isinstance(thumbnails, list):
        for entry in thumbnails:
            if isinstance(entry, dict):
                url = _as_str(entry.get("url"))
                if url:
                    return url
    return _as_str(data.get("thumbnail"))


def _publish_date(data: dict[str, Any]) -> datetime | None:
    for key in ("timestamp", "release_timestamp"):
        value = data.get(key)
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            try:
                return datetime.fromtimestamp(value, tz=timezone.utc)
            except (OverflowError, OSError, ValueError):
                continue
    upload_date = _as_str(data.get("upload_date"))
    if upload_date:
        try:
            return datetime.strptime(upload_date, "%Y%m%d").replace(tzinfo=timezone.utc)
        except ValueError:
            return None
    return None


def _run_subprocess(command: list[str]) -> subprocess.CompletedProcess[str]:
    return subprocess.run(command, check=False, capture_output=True, text=True)


def _summarize_error(completed: subprocess.CompletedProcess[str]) -> str:
    stderr = completed.stderr or ""
    stdout = completed.stdout or ""
    message = stderr.strip() or stdout.strip()
    if not message:
        return f"yt-dlp failed with exit code {completed.returncode}"
    return message.splitlines()[-1]


def _as_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value
    return None


def _as_nonneg_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)) and value >= 0:
        return int(value)
    return None
