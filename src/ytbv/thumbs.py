from __future__ import annotations

import hashlib
import logging
import os
import threading
from pathlib import Path
from typing import Callable
from uuid import uuid4

import httpx
from PIL import Image

from .paths import thumbs_cache_dir

logger = logging.getLogger(__name__)

Fetcher = Callable[[str], bytes]

FILENAME_EXTENSION = ".img"
_MAX_STEM_LENGTH = 64
_HASH_LENGTH = 12


class ThumbnailError(Exception):
    pass


class CacheDirectoryError(ThumbnailError):
    pass


class DownloadError(ThumbnailError):
    pass


class WriteError(ThumbnailError):
    pass


class DecodeError(ThumbnailError):
    pass


class ThumbnailCache:
    """On-disk thumbnail store keyed by source URL.

    A file at the resolved path is the only hit signal. Entries are written
    once through a temporary file and a rename, so a failed download never
    leaves a file behind at the final path.
    """

    def __init__(self, root: Path | None = None, fetcher: Fetcher | None = None) -> None:
        self._root = root
        self._fetcher = fetcher or _http_fetch
        self._ready = False
        self._lock = threading.Lock()

    @property
    def root(self) -> Path:
        if self._root is None:
            self._root = thumbs_cache_dir()
        return self._root

    def resolve(self, url: str) -> Path:
        root = self._ensure_root()
        return root / safe_filename(url)

    def fetch(self, url: str) -> Path:
        if not url:
            raise DownloadError("Missing thumbnail URL")
        path = self.resolve(url)
        if path.exists():
            return path

        logger.debug("downloading thumbnail %s", url)
        data = self._fetcher(url)
        _write_atomic(path, data)
        return path

    def _ensure_root(self) -> Path:
        root = self.root
        with self._lock:
            if self._ready:
                return root
            try:
                root.mkdir(parents=True, exist_ok=True)
            except OSError as exc:
                raise CacheDirectoryError(f"Cache dir error: {root} ({exc})") from exc
            self._ready = True
        return root


def safe_filename(url: str) -> str:
    stem = "".join(ch.lower() if ch.isascii() and ch.isalnum() else "_" for ch in url)
    digest = hashlib.sha1(url.encode("utf-8")).hexdigest()[:_HASH_LENGTH]
    return f"{stem[:_MAX_STEM_LENGTH]}_{digest}{FILENAME_EXTENSION}"


def read_image_size(path: Path) -> tuple[int, int]:
    try:
        with Image.open(path) as image:
            width, height = image.size
    except (OSError, ValueError) as exc:
        raise DecodeError(f"Cannot read image size: {path.name}") from exc
    if width <= 0 or height <= 0:
        raise DecodeError(f"Invalid image size: {path.name}")
    return width, height


def _write_atomic(path: Path, data: bytes) -> None:
    # Entries are published with a hard link so an existing file is never replaced.
    tmp_path = path.with_name(f".{path.name}.{uuid4().hex}.tmp")
    try:
        tmp_path.write_bytes(data)
        os.link(tmp_path, path)
    except FileExistsError:
        logger.debug("thumbnail already cached: %s", path.name)
    except OSError as exc:
        raise WriteError(f"Write error: {exc}") from exc
    finally:
        tmp_path.unlink(missing_ok=True)


def _http_fetch(url: str) -> bytes:
    try:
        with httpx.Client(follow_redirects=True, timeout=10.0) as client:
            response = client.get(url)
            response.raise_for_status()
            return response.content
    except httpx.HTTPError as exc:
        raise DownloadError(f"Download error: {exc}") from exc
