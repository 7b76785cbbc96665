from __future__ import annotations

import logging
from typing import Protocol

from .layout import CellRect, PreviewLayout, split_preview
from .models import AppState, Focus
from .render_guard import RenderGuard
from .workers import SearchResult, ThumbnailResult, WorkerMessage

logger = logging.getLogger(__name__)

KEY_UP = "up"
KEY_DOWN = "down"
KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_ENTER = "enter"
KEY_BACKSPACE = "backspace"
QUIT_KEYS = frozenset({"ctrl+q", "escape"})

THUMBNAIL_READY = "Thumbnail ready."


class TaskSpawner(Protocol):
    def spawn_search(self, query: str) -> None: ...

    def spawn_thumbnail(self, generation: int, index: int, url: str) -> None: ...

    def drain(self) -> list[WorkerMessage]: ...


class Launcher(Protocol):
    def launch(self, url: str) -> None: ...


class Coordinator:
    """Owns the application state and turns keys and worker messages into transitions.

    Every method runs on the UI thread. Background work is only started
    through ``tasks`` and only observed through the messages it drains.
    """

    def __init__(
        self,
        tasks: TaskSpawner,
        player: Launcher,
        state: AppState | None = None,
    ) -> None:
        self.tasks = tasks
        self.player = player
        self.state = state or AppState()

    def handle_key(self, key: str, character: str | None = None) -> bool:
        """Apply one key press. Returns True when the application should quit."""
        if key in QUIT_KEYS:
            return True
        state = self.state
        if key == KEY_ENTER:
            if state.focus == Focus.QUERY:
                self.submit_search()
            else:
                self.play_selected()
        elif key == KEY_UP:
            if state.focus == Focus.RESULTS:
                if state.selected > 0:
                    self.select(state.selected - 1)
                else:
                    state.focus = Focus.QUERY
        elif key == KEY_DOWN:
            if state.focus == Focus.QUERY:
                if state.results:
                    state.focus = Focus.RESULTS
                    self.request_thumbnail(state.selected)
            elif state.selected + 1 < len(state.results):
                self.select(state.selected + 1)
        elif state.focus == Focus.QUERY:
            self._edit_query(key, character)
        return False

    def submit_search(self) -> bool:
        state = self.state
        query = state.query.strip()
        if not query or state.searching:
            return False
        state.searching = True
        state.status = f"Searching for '{query}'..."
        self.tasks.spawn_search(query)
        return True

    def play_selected(self) -> None:
        video = self.state.selected_video()
        if video is None:
            return
        self.player.launch(video.url)
        self.state.status = f"Playing: {video.title}"

    def select(self, index: int) -> None:
        state = self.state
        if not state.results:
            state.selected = 0
            return
        state.selected = max(0, min(index, len(state.results) - 1))
        self.request_thumbnail(state.selected)

    def request_thumbnail(self, index: int) -> bool:
        state = self.state
        if state.thumbnails_disabled or not 0 <= index < len(state.results):
            return False
        video = state.results[index]
        if video.thumbnail_path is not None or video.thumbnail_loading:
            return False
        if not video.thumbnail_url:
            return False
        video.thumbnail_loading = True
        self.tasks.spawn_thumbnail(state.generation, index, video.thumbnail_url)
        return True

    def process_messages(self) -> int:
        messages = self.tasks.drain()
        for message in messages:
            self.apply_message(message)
        return len(messages)

    def apply_message(self, message: WorkerMessage) -> None:
        if isinstance(message, SearchResult):
            self._apply_search(message)
        elif isinstance(message, ThumbnailResult):
            self._apply_thumbnail(message)

    def render_frame(self, inner: CellRect, guard: RenderGuard) -> PreviewLayout:
        video = self.state.selected_video()
        has_thumbnail = (
            video is not None
            and video.thumbnail_path is not None
            and not self.state.thumbnails_disabled
        )
        layout = split_preview(
            inner,
            video.thumbnail_size if video is not None else None,
            has_thumbnail,
        )
        path = video.thumbnail_path if video is not None and layout.thumbnail else None
        guard.render(path, layout.thumbnail)
        return layout

    def _apply_search(self, message: SearchResult) -> None:
        state = self.state
        state.searching = False
        if message.videos is None:
            state.status = message.error or "Search failed"
            return
        state.generation += 1
        state.results = list(message.videos)
        state.selected = 0
        if state.results:
            state.focus = Focus.RESULTS
            self.request_thumbnail(0)
        else:
            state.focus = Focus.QUERY
        state.status = f"Found {len(state.results)} results."

    def _apply_thumbnail(self, message: ThumbnailResult) -> None:
        state = self.state
        if message.cache_unavailable and not state.thumbnails_disabled:
            state.thumbnails_disabled = True
            state.status = f"{message.error} (thumbnails disabled)"
        if message.generation != state.generation or not 0 <= message.index < len(state.results):
            logger.debug(
                "dropping stale thumbnail for index %d (generation %d)",
                message.index,
                message.generation,
            )
            return
        video = state.results[message.index]
        video.thumbnail_loading = False
        if message.path is not None:
            video.thumbnail_path = message.path
            video.thumbnail_size = message.size
            state.status = THUMBNAIL_READY
        elif not message.cache_unavailable:
            state.status = message.error or "Thumbnail download failed"

    def _edit_query(self, key: str, character: str | None) -> None:
        state = self.state
        if key == KEY_BACKSPACE:
            if state.cursor > 0:
                state.query = state.query[: state.cursor - 1] + state.query[state.cursor :]
                state.cursor -= 1
        elif key == KEY_LEFT:
            if state.cursor > 0:
                state.cursor -= 1
        elif key == KEY_RIGHT:
            if state.cursor < len(state.query):
                state.cursor += 1
        elif character and len(character) == 1 and character.isprintable():
            state.query = state.query[: state.cursor] + character + state.query[state.cursor :]
            state.cursor += 1
