# src/timelog/api.py

from __future__ import annotations

import logging
from datetime import UTC, datetime, timedelta
from pathlib import Path

from .config import Settings, get_settings
from .logging_setup import setup_logging
from .store.ports import TimeLogRepo
from .store.store import Store

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings | None = None) -> Path:
    """
    Install console + file logging from settings (log_dir, log_level) and
    announce the app. Call once at startup, before open_store().
    """
    if settings is None:
        settings = get_settings()

    log_file = setup_logging(log_dir=settings.log_dir, console_level=settings.log_level)
    logger.info("Starting %s log_file=%s", settings.app_name, log_file)
    return log_file


def open_store(settings: Settings | None = None) -> Store:
    """
    Build a Store from settings (falls back to get_settings()).

    The caller owns the returned Store and should close() it on shutdown.
    """
    if settings is None:
        settings = get_settings()

    settings.data_dir.mkdir(parents=True, exist_ok=True)
    return Store(
        settings.db_path,
        foreign_keys=settings.foreign_keys,
        timeout=settings.db_timeout,
    )


def format_duration(td: timedelta) -> str:
    """ISO-8601 duration, whole seconds: PT30M, PT1H5M, P1DT2H, PT0S."""
    total = int(td.total_seconds())
    if total < 0:
        raise ValueError("duration must not be negative")

    days, rem = divmod(total, 86400)
    hours, rem = divmod(rem, 3600)
    minutes, seconds = divmod(rem, 60)

    out = "P"
    if days:
        out += f"{days}D"
    clock = ""
    if hours:
        clock += f"{hours}H"
    if minutes:
        clock += f"{minutes}M"
    if seconds:
        clock += f"{seconds}S"
    if clock:
        out += "T" + clock
    elif not days:
        out += "T0S"
    return out


def log_work(
    repo: TimeLogRepo,
    name: str,
    notes: str,
    duration: timedelta | str,
    *,
    at: datetime | None = None,
) -> None:
    """
    Convenience helper: record one occurrence of work on task `name`.

    A timedelta duration is stored as ISO-8601; a string is stored as given.
    `at` defaults to now (UTC).
    """
    if at is None:
        at = datetime.now(UTC)
    duration_str = format_duration(duration) if isinstance(duration, timedelta) else duration
    time_stamp = at.isoformat(timespec="seconds")

    repo.add_task(name, notes, time_stamp, duration_str)
    logger.info("Logged work task=%r at=%s duration=%s", name, time_stamp, duration_str)
