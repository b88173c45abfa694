# tests/conftest.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path
from types import SimpleNamespace

import pytest

from timelog.store.store import Store


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with timelog.api.open_store.

    A SimpleNamespace instead of the real config keeps tests independent of
    the environment.
    """
    return SimpleNamespace(
        app_name="timelog-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        db_path=tmp_path / "data" / "timelog.sqlite3",
        log_dir=tmp_path / "logs",
        foreign_keys=True,
        db_timeout=5.0,
    )


@pytest.fixture()
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "timelog.sqlite3"


@pytest.fixture()
def store(db_path: Path) -> Iterator[Store]:
    """Real SQLite store: its behavior is what these tests are about."""
    s = Store(db_path)
    try:
        yield s
    finally:
        s.close()


@pytest.fixture()
def restore_root_logging() -> Iterator[None]:
    """Undo setup_logging(): drop the handlers it installed and reset the root level."""
    root = logging.getLogger()
    before, level = set(root.handlers), root.level
    try:
        yield
    finally:
        for h in list(root.handlers):
            if h not in before:
                root.removeHandler(h)
                h.close()
        root.setLevel(level)
        logging.captureWarnings(False)
