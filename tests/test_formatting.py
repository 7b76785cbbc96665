from datetime import datetime, timezone

from ytbv.formatting import format_duration, format_published, format_views, truncate


def test_format_duration() -> None:
    assert format_duration(None) == "-"
    assert format_duration(5) == "00:05"
    assert format_duration(125) == "02:05"
    assert format_duration(3725) == "62:05"


def test_format_views() -> None:
    assert format_views(None) == "- views"
    assert format_views(999) == "999 views"
    assert format_views(1000) == "1K views"
    assert format_views(1500) == "1.5K views"
    assert format_views(2_000_000) == "2M views"
    assert format_views(1_234_567_890) == "1.23B views"


def test_format_published() -> None:
    date = datetime(2024, 1, 31, tzinfo=timezone.utc)
    assert format_published("2 days ago", date) == "Published 2 days ago [31/01/2024]"
    assert format_published("2 days ago", None) == "Published 2 days ago"
    assert format_published(None, date) == "Published [31/01/2024]"
    assert format_published(None, None) == "Published -"


def test_truncate() -> None:
    assert truncate("hello", 10) == "hello"
    assert truncate("hello world", 8) == "hello..."
    assert truncate("hello", 2) == "he"
    assert truncate("hello", 0) == ""
