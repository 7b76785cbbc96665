from __future__ import annotations

import os
from pathlib import Path

from platformdirs import user_cache_path, user_config_path, user_data_path

APP_NAME = "ytbv"
CACHE_HOME_ENV = "XDG_CACHE_HOME"
DATA_HOME_ENV = "XDG_DATA_HOME"


def cache_root() -> Path:
    root = user_cache_path(APP_NAME)
    root.mkdir(parents=True, exist_ok=True)
    return root


def config_root() -> Path:
    return user_config_path(APP_NAME)


def config_path() -> Path:
    return config_root() / "config.json"


def log_path() -> Path:
    return cache_root() / "ytbv.log"


def thumbs_cache_dir() -> Path:
    """Thumbnail cache location; not created here, the cache creates it lazily."""
    base = _env_dir(CACHE_HOME_ENV)
    if base is not None:
        return base / APP_NAME / "thumbs"
    return user_cache_path(APP_NAME) / "thumbs"


def search_store_dir() -> Path:
    base = _env_dir(DATA_HOME_ENV)
    if base is not None:
        return base / APP_NAME / "search"
    return user_data_path(APP_NAME) / "search"


def _env_dir(name: str) -> Path | None:
    value = os.environ.get(name, "").strip()
    if not value:
        return None
    return Path(value).expanduser()
