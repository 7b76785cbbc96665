from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from .layout import CellRect

Blit = Callable[[Path, CellRect], None]
Clear = Callable[[], None]


@dataclass(frozen=True)
class Fingerprint:
    path: Path
    rect: CellRect


class RenderGuard:
    """Emits a thumbnail only when its path or target rectangle changed."""

    def __init__(self, blit: Blit, clear: Clear | None = None) -> None:
        self._blit = blit
        self._clear = clear
        self.last: Fingerprint | None = None

    def render(self, path: Path | None, rect: CellRect | None) -> bool:
        if path is None or rect is None or rect.is_empty:
            self.invalidate()
            return False
        fingerprint = Fingerprint(path, rect)
        if fingerprint == self.last:
            return False
        self._blit(path, rect)
        self.last = fingerprint
        return True

    def invalidate(self) -> None:
        if self.last is None:
            return
        self.last = None
        if self._clear is not None:
            self._clear()
