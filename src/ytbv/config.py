from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from .paths import config_path
from .player import DEFAULT_PLAYER, DEFAULT_YTDL_FORMAT
from .search import DEFAULT_SEARCH_LIMIT

DEFAULT_LOG_LEVEL = "WARNING"


@dataclass
class AppConfig:
    search_limit: int = DEFAULT_SEARCH_LIMIT
    player: str = DEFAULT_PLAYER
    ytdl_format: str = DEFAULT_YTDL_FORMAT
    log_level: str = DEFAULT_LOG_LEVEL


def load_config(path: Path | None = None) -> tuple[AppConfig, str | None]:
    path = path or config_path()
    try:
        if not path.is_file():
            return AppConfig(), None
    except OSError as exc:
        return AppConfig(), f"Failed to read config: {path} ({exc})"
    try:
        raw = path.read_text(encoding="utf-8")
    except OSError as exc:
        return AppConfig(), f"Failed to read config: {path} ({exc})"
    try:
        data = json.loads(raw)
    except json.JSONDecodeError:
        return AppConfig(), f"Config file is not valid JSON: {path}"
    if not isinstance(data, dict):
        return AppConfig(), f"Config file must be a JSON object: {path}"
    return _parse_config_data(data), None


def _parse_config_data(data: dict[str, Any]) -> AppConfig:
    defaults = AppConfig()
    return AppConfig(
        search_limit=_as_positive_int(data.get("search_limit")) or defaults.search_limit,
        player=_as_str(data.get("player")) or defaults.player,
        ytdl_format=_as_str(data.get("ytdl_format")) or defaults.ytdl_format,
        log_level=_as_log_level(data.get("log_level")) or defaults.log_level,
    )


def _as_str(value: Any) -> str | None:
    if isinstance(value, str):
        value = value.strip()
        return value or None
    return None


def _as_positive_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, float) and value.is_integer():
        value = int(value)
    if isinstance(value, int) and value > 0:
        return value
    return None


def _as_log_level(value: Any) -> str | None:
    text = _as_str(value)
    if text is None:
        return None
    text = text.upper()
    if isinstance(logging.getLevelName(text), int):
        return text
    return None
