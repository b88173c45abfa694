# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from timelog import config
from timelog.config import Settings, get_settings

_VARS = (
    "TIMELOG_APP_NAME",
    "TIMELOG_LOG_LEVEL",
    "TIMELOG_DATA_DIR",
    "TIMELOG_DB_PATH",
    "TIMELOG_LOG_DIR",
    "TIMELOG_FOREIGN_KEYS",
    "TIMELOG_DB_TIMEOUT",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)
    # Keep a developer's local .env out of the picture.
    monkeypatch.chdir(tmp_path)
    monkeypatch.setattr(config, "_SETTINGS", None)


def test_defaults() -> None:
    s = Settings.from_env()
    assert s.app_name == "timelog"
    assert s.log_level == "INFO"
    assert s.data_dir == Path(".local/timelog")
    assert s.db_path == Path(".local/timelog/timelog.sqlite3")
    assert s.log_dir == Path(".local/timelog")
    assert s.foreign_keys is True
    assert s.db_timeout == 30.0


def test_paths_follow_data_dir(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TIMELOG_DATA_DIR", str(tmp_path / "d"))
    s = Settings.from_env()
    assert s.db_path == tmp_path / "d" / "timelog.sqlite3"
    assert s.log_dir == tmp_path / "d"


def test_overrides(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("TIMELOG_DB_PATH", str(tmp_path / "x.db"))
    monkeypatch.setenv("TIMELOG_LOG_LEVEL", "debug")
    monkeypatch.setenv("TIMELOG_FOREIGN_KEYS", "off")
    monkeypatch.setenv("TIMELOG_DB_TIMEOUT", "2.5")
    s = Settings.from_env()
    assert s.db_path == tmp_path / "x.db"
    assert s.log_level == "DEBUG"
    assert s.foreign_keys is False
    assert s.db_timeout == 2.5


def test_bad_timeout_falls_back(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("TIMELOG_DB_TIMEOUT", "soon")
    assert Settings.from_env().db_timeout == 30.0


def test_get_settings_reads_dotenv_once(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # Registers the variable with monkeypatch so the value loaded from .env is undone too.
    monkeypatch.setenv("TIMELOG_APP_NAME", "unset")
    monkeypatch.delenv("TIMELOG_APP_NAME")
    (tmp_path / ".env").write_text("TIMELOG_APP_NAME=from-dotenv\n", "utf-8")

    first = get_settings()
    assert first.app_name == "from-dotenv"
    assert get_settings() is first

    monkeypatch.setenv("TIMELOG_APP_NAME", "from-env")
    assert get_settings().app_name == "from-dotenv"
    assert get_settings(reload=True).app_name == "from-env"
