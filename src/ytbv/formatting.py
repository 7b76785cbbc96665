from __future__ import annotations

from datetime import datetime

_VIEW_UNITS = (
    (1_000_000_000, "B"),
    (1_000_000, "M"),
    (1_000, "K"),
)


def format_duration(seconds: int | None) -> str:
    if seconds is None:
        return "-"
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"


def format_views(views: int | None) -> str:
    if views is None:
        return "- views"
    for threshold, suffix in _VIEW_UNITS:
        if views >= threshold:
            text = f"{views / threshold:.2f}".rstrip("0").rstrip(".")
            return f"{text}{suffix} views"
    return f"{views} views"


def format_published(relative: str | None, date: datetime | None) -> str:
    absolute = date.strftime("%d/%m/%Y") if date is not None else None
    if relative and absolute:
        return f"Published {relative} [{absolute}]"
    if relative:
        return f"Published {relative}"
    if absolute:
        return f"Published [{absolute}]"
    return "Published -"


def truncate(text: str, limit: int) -> str:
    if limit <= 0:
        return ""
    if len(text) <= limit:
        return text
    if limit <= 3:
        return text[:limit]
    return text[: limit - 3] + "..."
