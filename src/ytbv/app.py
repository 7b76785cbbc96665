from __future__ import annotations

import argparse
import logging
from pathlib import Path

from rich.text import Text
from textual import events
from textual.app import App, ComposeResult
from textual.containers import Horizontal, Vertical
from textual.theme import Theme
from textual.widgets import Static
from textual_image.widget import Image as PreviewImage

from .config import AppConfig, load_config
from .coordinator import Coordinator
from .formatting import format_duration, format_published, format_views, truncate
from .layout import CellRect, visible_window
from .models import AppState, Focus, VideoSummary
from .paths import CACHE_HOME_ENV, DATA_HOME_ENV, config_path, log_path, search_store_dir
from .player import Player
from .render_guard import RenderGuard
from .search import SearchService
from .thumbs import ThumbnailCache
from .workers import TaskRunner

logger = logging.getLogger(__name__)

TICK_SECONDS = 0.2
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s - %(message)s"

TOKYO_NIGHT_THEME = Theme(
    name="tokyo-night",
    primary="#7aa2f7",
    secondary="#7dcfff",
    accent="#bb9af7",
    warning="#e0af68",
    error="#f7768e",
    success="#9ece6a",
    foreground="#c0caf5",
    background="#1a1b26",
    surface="#1f2335",
    panel="#24283b",
    boost="#2f334d",
)


class YtbvApp(App):
    CSS = """
    Screen {
        background: $background;
        color: $text;
    }

    #root {
        height: 100%;
        padding: 1 1;
    }

    #query {
        height: 3;
        border: round $boost;
        background: $surface;
    }

    #results {
        height: 1fr;
        border: round $boost;
        background: $surface;
    }

    #query.focused, #results.focused {
        border: round $secondary;
    }

    #results {
        border-subtitle-color: $text-muted;
    }

    #details {
        height: 10;
        border: round $accent;
        background: $panel;
    }

    #detail_text {
        width: 1fr;
        height: 100%;
    }

    #thumb_image {
        width: 1;
        height: 1;
    }

    .hidden {
        display: none;
    }
    """

    def __init__(self, coordinator: Coordinator) -> None:
        super().__init__()
        self.register_theme(TOKYO_NIGHT_THEME)
        self.theme = TOKYO_NIGHT_THEME.name
        self.coordinator = coordinator
        self._guard = RenderGuard(self._blit_thumbnail, self._clear_thumbnail)
        self._query: Static | None = None
        self._results: Static | None = None
        self._details: Horizontal | None = None
        self._detail_text: Static | None = None
        self._thumb_image: PreviewImage | None = None

    def compose(self) -> ComposeResult:
        with Vertical(id="root"):
            yield Static("", id="query")
            yield Static("", id="results")
            with Horizontal(id="details"):
                yield Static("", id="detail_text")
                yield PreviewImage(None, id="thumb_image", classes="hidden")

    def on_mount(self) -> None:
        self._query = self.query_one("#query", Static)
        self._results = self.query_one("#results", Static)
        self._details = self.query_one("#details", Horizontal)
        self._detail_text = self.query_one("#detail_text", Static)
        self._thumb_image = self.query_one("#thumb_image", PreviewImage)
        self._query.border_title = "Search"
        self._results.border_title = "Results"
        self._details.border_title = "Details"
        self.set_interval(TICK_SECONDS, self._tick)
        self.call_after_refresh(self._render_frame)

    def on_key(self, event: events.Key) -> None:
        character = event.character if event.is_printable else None
        quit_requested = self.coordinator.handle_key(event.key, character)
        event.stop()
        event.prevent_default()
        if quit_requested:
            self.exit()
            return
        self._render_frame()

    def on_resize(self, event: events.Resize) -> None:
        self.call_after_refresh(self._render_frame)

    def _tick(self) -> None:
        self.coordinator.process_messages()
        self._render_frame()

    def _render_frame(self) -> None:
        if self._details is None or self._detail_text is None:
            return
        state = self.coordinator.state
        self._render_query(state)
        self._render_results(state)
        region = self._details.content_region
        inner = CellRect(region.x, region.y, region.width, region.height)
        layout = self.coordinator.render_frame(inner, self._guard)
        self._detail_text.update(_format_details(state.selected_video(), layout.text.width))

    def _render_query(self, state: AppState) -> None:
        if self._query is None:
            return
        focused = state.focus == Focus.QUERY
        self._query.set_class(focused, "focused")
        width = self._query.content_region.width
        self._query.update(_format_query(state.query, state.cursor, width, focused))

    def _render_results(self, state: AppState) -> None:
        if self._results is None:
            return
        self._results.set_class(state.focus == Focus.RESULTS, "focused")
        self._results.border_subtitle = state.status
        region = self._results.content_region
        self._results.update(_format_results(state, region.width, region.height))

    def _blit_thumbnail(self, path: Path, rect: CellRect) -> None:
        if self._thumb_image is None or self._details is None:
            return
        top = max(0, rect.y - self._details.content_region.y)
        self._thumb_image.styles.width = rect.width
        self._thumb_image.styles.height = rect.height
        self._thumb_image.styles.margin = (top, 0, 0, 0)
        try:
            _update_image_widget(self._thumb_image, path)
        except Exception as exc:
            logger.warning("failed to draw thumbnail %s: %s", path, exc)
            self.coordinator.state.status = f"Thumbnail error: {_short_error(str(exc))}"
            self._thumb_image.add_class("hidden")
            return
        self._thumb_image.remove_class("hidden")

    def _clear_thumbnail(self) -> None:
        if self._thumb_image is not None:
            self._thumb_image.add_class("hidden")


def _format_query(query: str, cursor: int, width: int, focused: bool) -> Text:
    if not focused or width <= 0:
        return Text(query)
    start = max(0, cursor - width + 1)
    visible = query[start : start + width]
    offset = cursor - start
    text = Text(visible)
    if offset < len(visible):
        text.stylize("reverse", offset, offset + 1)
    else:
        text.append(" ", style="reverse")
    return text


def _format_results(state: AppState, width: int, rows: int) -> Text:
    if not state.results:
        return Text("Searching..." if state.searching else "", style="italic")
    start = visible_window(state.selected, len(state.results), rows)
    end = start + rows if rows > 0 else len(state.results)
    text = Text()
    for index in range(start, min(end, len(state.results))):
        video = state.results[index]
        style = ""
        if index == state.selected and state.focus == Focus.RESULTS:
            style = "bold yellow"
        if index > start:
            text.append("\n")
        text.append(truncate(video.title, width) if width > 0 else video.title, style=style)
    return text


def _format_details(video: VideoSummary | None, width: int) -> Text:
    if video is None:
        return Text("No results yet.")
    limit = width if width > 0 else len(video.title)
    lines = [
        (truncate(video.title, limit), "bold"),
        (format_views(video.view_count), "yellow"),
        (f"Length: {format_duration(video.duration)}", "green"),
        (f"Uploaded by {video.channel or '-'}", "blue"),
        (format_published(video.publish_date_text, video.publish_date), "magenta"),
    ]
    text = Text()
    for index, (line, style) in enumerate(lines):
        if index:
            text.append("\n")
        text.append(line, style=style)
    return text


def _short_error(message: str) -> str:
    line = message.splitlines()[0] if message else ""
    return (line[:77] + "...") if len(line) > 80 else line


def _update_image_widget(widget: PreviewImage, path: Path) -> None:
    setter = getattr(widget, "set_image", None)
    if callable(setter):
        setter(path)
        return
    widget.image = path


def build_coordinator(config: AppConfig) -> Coordinator:
    search = SearchService(limit=config.search_limit, store_dir=search_store_dir())
    tasks = TaskRunner(search, ThumbnailCache())
    player = Player(command=config.player, ytdl_format=config.ytdl_format)
    return Coordinator(tasks, player)


def setup_logging(level: str) -> None:
    numeric_level = getattr(logging, level.upper(), logging.WARNING)
    handlers: list[logging.Handler] = []
    try:
        handlers.append(logging.FileHandler(log_path(), mode="a", encoding="utf-8"))
    except OSError:
        handlers.append(logging.NullHandler())
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, handlers=handlers)


def _cli_help_text() -> str:
    return "\n".join(
        [
            "Keys: type a query, Enter to search, Up/Down to browse,",
            "Enter on a result to play it, Ctrl+Q or Esc to quit.",
            "",
            f"Config file: {config_path()}",
            f"Thumbnail cache: ${CACHE_HOME_ENV}/ytbv/thumbs (platform cache dir if unset)",
            f"Search store: ${DATA_HOME_ENV}/ytbv/search (platform data dir if unset)",
        ]
    )


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="ytbv",
        description="Search videos, preview thumbnails in the terminal and play them.",
        epilog=_cli_help_text(),
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    parser.add_argument("--search-limit", type=int, help="Number of search results")
    parser.add_argument("--player", help="Player command (default: mpv)")
    parser.add_argument("--log-level", help="Log level, e.g. DEBUG or INFO")
    args = parser.parse_args(argv)

    config, config_error = load_config()
    if args.search_limit is not None:
        if args.search_limit <= 0:
            parser.error("--search-limit must be a positive number")
        config.search_limit = args.search_limit
    if args.player:
        config.player = args.player
    if args.log_level:
        config.log_level = args.log_level

    setup_logging(config.log_level)
    coordinator = build_coordinator(config)
    if config_error:
        coordinator.state.status = config_error
    app = YtbvApp(coordinator)
    app.run()
    return app.return_code or 0
