from __future__ import annotations

import json

from ytbv.config import AppConfig, load_config


def test_load_config_missing_file(tmp_path) -> None:
    path = tmp_path / "config.json"
    config, error = load_config(path)
    assert error is None
    assert config == AppConfig()


def test_load_config_values(tmp_path) -> None:
    path = tmp_path / "config.json"
    payload = {
        "search_limit": 5,
        "player": "vlc",
        "ytdl_format": "best",
        "log_level": "debug",
        "unknown": True,
    }
    path.write_text(json.dumps(payload), encoding="utf-8")
    config, error = load_config(path)
    assert error is None
    assert config == AppConfig(search_limit=5, player="vlc", ytdl_format="best", log_level="DEBUG")


def test_load_config_bad_values_use_defaults(tmp_path) -> None:
    path = tmp_path / "config.json"
    payload = {"search_limit": -3, "player": "  ", "log_level": "loud"}
    path.write_text(json.dumps(payload), encoding="utf-8")
    config, error = load_config(path)
    assert error is None
    assert config == AppConfig()


def test_load_config_invalid_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not-json", encoding="utf-8")
    config, error = load_config(path)
    assert config == AppConfig()
    assert error is not None


def test_load_config_not_object(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2]", encoding="utf-8")
    config, error = load_config(path)
    assert config == AppConfig()
    assert error is not None and "JSON object" in error


def test_load_config_unreachable_dir_uses_defaults(tmp_path) -> None:
    blocker = tmp_path / "file"
    blocker.write_text("x", encoding="utf-8")
    config, error = load_config(blocker / "ytbv" / "config.json")
    assert error is None
    assert config == AppConfig()
