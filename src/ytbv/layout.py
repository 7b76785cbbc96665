from __future__ import annotations

from dataclasses import dataclass

DEFAULT_IMAGE_SIZE = (160, 90)
MIN_PREVIEW_WIDTH = 50
MIN_PREVIEW_HEIGHT = 8
MIN_TEXT_WIDTH = 20
MIN_THUMB_WIDTH = 10


@dataclass(frozen=True)
class CellRect:
    x: int
    y: int
    width: int
    height: int

    @property
    def is_empty(self) -> bool:
        return self.width <= 0 or self.height <= 0


@dataclass(frozen=True)
class PreviewLayout:
    text: CellRect
    thumbnail: CellRect | None


def fit_dimensions_cells(
    img_width: int,
    img_height: int,
    bound_width: int,
    bound_height: int,
) -> tuple[int, int]:
    """Fit an image into a cell box, keeping its aspect ratio.

    A cell holds two vertical pixels, so the box is ``bound_height * 2`` pixels
    tall. Images that already fit keep their native size; larger images are
    scaled down along whichever axis constrains them. Returns ``(0, 0)`` when
    any dimension is zero.
    """
    if img_width <= 0 or img_height <= 0 or bound_width <= 0 or bound_height <= 0:
        return 0, 0

    bound_height_px = bound_height * 2
    if img_width <= bound_width and img_height <= bound_height_px:
        return img_width, max(1, (img_height + 1) // 2)

    by_height = img_width * bound_height_px
    by_width = bound_width * img_height
    if by_width <= by_height:
        scaled_height_px = img_height * bound_width // img_width
        return bound_width, max(1, scaled_height_px // 2)

    scaled_width = img_width * bound_height_px // img_height
    return max(1, scaled_width), bound_height


def split_preview(
    inner: CellRect,
    image_size: tuple[int, int] | None,
    has_thumbnail: bool,
) -> PreviewLayout:
    if (
        not has_thumbnail
        or inner.width < MIN_PREVIEW_WIDTH
        or inner.height < MIN_PREVIEW_HEIGHT
    ):
        return PreviewLayout(text=inner, thumbnail=None)

    max_thumb_width = inner.width - MIN_TEXT_WIDTH
    if max_thumb_width < MIN_THUMB_WIDTH:
        return PreviewLayout(text=inner, thumbnail=None)

    img_width, img_height = image_size or DEFAULT_IMAGE_SIZE
    thumb_width, thumb_height = fit_dimensions_cells(
        img_width, img_height, max_thumb_width, inner.height
    )
    if thumb_width == 0 or thumb_height == 0:
        return PreviewLayout(text=inner, thumbnail=None)

    thumb = CellRect(
        x=inner.x + inner.width - thumb_width,
        y=inner.y + inner.height - thumb_height,
        width=thumb_width,
        height=thumb_height,
    )
    text = CellRect(
        x=inner.x,
        y=inner.y,
        width=inner.width - thumb_width,
        height=inner.height,
    )
    return PreviewLayout(text=text, thumbnail=thumb)


def visible_window(selected: int, total: int, rows: int) -> int:
    """First list index to draw so that ``selected`` stays on screen."""
    if rows <= 0 or total <= rows:
        return 0
    selected = max(0, min(selected, total - 1))
    start = selected - rows + 1
    return max(0, min(start, total - rows))
