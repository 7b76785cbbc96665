from __future__ import annotations

import logging
import shutil
import subprocess
from pathlib import Path
from typing import Callable

logger = logging.getLogger(__name__)

MPV_NAME = "mpv"
DEFAULT_PLAYER = MPV_NAME
DEFAULT_YTDL_FORMAT = "bestvideo[height<=1080]+bestaudio/best"

Spawner = Callable[[list[str]], object]


class Player:
    """Fire-and-forget launcher for an external media player."""

    def __init__(
        self,
        command: str = DEFAULT_PLAYER,
        ytdl_format: str = DEFAULT_YTDL_FORMAT,
        spawner: Spawner | None = None,
    ) -> None:
        self.command = command
        self.ytdl_format = ytdl_format
        self._spawner = spawner or _spawn_detached
        self._command_path: str | None = None

    def build_command(self, url: str) -> list[str] | None:
        path = self._ensure_command_path()
        if path is None:
            return None
        if Path(path).stem.lower() != MPV_NAME:
            return [path, url]
        return [path, f"--ytdl-format={self.ytdl_format}", url]

    def launch(self, url: str) -> None:
        command = self.build_command(url)
        if command is None:
            logger.warning("player %r not found on PATH", self.command)
            return
        try:
            self._spawner(command)
        except OSError:
            logger.warning("failed to launch player for %s", url, exc_info=True)

    def _ensure_command_path(self) -> str | None:
        if self._command_path is None:
            self._command_path = shutil.which(self.command)
        return self._command_path


def _spawn_detached(command: list[str]) -> subprocess.Popen[bytes]:
    return subprocess.Popen(
        command,
        stdin=subprocess.DEVNULL,
        stdout=subprocess.DEVNULL,
        stderr=subprocess.DEVNULL,
        start_new_session=True,
    )
