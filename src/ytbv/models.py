from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path

INITIAL_STATUS = "Type a query and press Enter."


class Focus(Enum):
    QUERY = "query"
    RESULTS = "results"


@dataclass
class VideoSummary:
    title: str
    url: str
    channel: str | None = None
    duration: int | None = None
    view_count: int | None = None
    publish_date: datetime | None = None
    publish_date_text: str | None = None
    thumbnail_url: str | None = None
    # Filled in during the session; the path is never cleared once set.
    thumbnail_path: Path | None = None
    thumbnail_size: tuple[int, int] | None = None
    thumbnail_loading: bool = False


@dataclass
class AppState:
    query: str = ""
    cursor: int = 0
    results: list[VideoSummary] = field(default_factory=list)
    selected: int = 0
    focus: Focus = Focus.QUERY
    searching: bool = False
    status: str = INITIAL_STATUS
    generation: int = 0
    thumbnails_disabled: bool = False

    def selected_video(self) -> VideoSummary | None:
        if 0 <= self.selected < len(self.results):
            return self.results[self.selected]
        return None
