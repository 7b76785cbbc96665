from __future__ import annotations

import pytest

from ytbv.app import _cli_help_text, _format_details, _format_query, main
from ytbv.models import VideoSummary
from ytbv.paths import config_path


def test_cli_help_text_includes_config_path() -> None:
    text = _cli_help_text()
    assert "XDG_CACHE_HOME" in text
    assert str(config_path()) in text


def test_main_help_flag_prints_help(capsys) -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0
    captured = capsys.readouterr()
    assert "ytbv" in captured.out


def test_main_rejects_bad_search_limit() -> None:
    with pytest.raises(SystemExit) as excinfo:
        main(["--search-limit", "0"])
    assert excinfo.value.code == 2


def test_format_query_marks_cursor() -> None:
    text = _format_query("cats", 1, 20, focused=True)
    assert text.plain == "cats"
    text = _format_query("cats", 4, 20, focused=True)
    assert text.plain == "cats "
    text = _format_query("abcdefgh", 8, 4, focused=True)
    assert text.plain == "fgh "


def test_format_details() -> None:
    assert _format_details(None, 40).plain == "No results yet."
    video = VideoSummary(
        title="Test video",
        url="https://www.youtube.com/watch?v=abc123",
        channel="Example",
        duration=125,
        view_count=1500,
    )
    lines = _format_details(video, 40).plain.splitlines()
    assert lines == [
        "Test video",
        "1.5K views",
        "Length: 02:05",
        "Uploaded by Example",
        "Published -",
    ]


def test_main_help_does_not_create_config_dir(tmp_path, monkeypatch, capsys) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    monkeypatch.setenv("XDG_CONFIG_HOME", str(blocker))
    with pytest.raises(SystemExit) as excinfo:
        main(["--help"])
    assert excinfo.value.code == 0
    assert "ytbv" in capsys.readouterr().out
    assert blocker.is_file()
