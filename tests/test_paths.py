from pathlib import Path

from ytbv.paths import search_store_dir, thumbs_cache_dir


def test_thumbs_cache_dir_from_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_CACHE_HOME", str(tmp_path))
    assert thumbs_cache_dir() == tmp_path / "ytbv" / "thumbs"
    assert not (tmp_path / "ytbv").exists()


def test_search_store_dir_from_env(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path))
    assert search_store_dir() == tmp_path / "ytbv" / "search"


def test_blank_env_falls_back(tmp_path: Path, monkeypatch) -> None:
    monkeypatch.setenv("XDG_CACHE_HOME", "  ")
    path = thumbs_cache_dir()
    assert path.name == "thumbs"
    assert path.parent.name == "ytbv"
