# src/timelog/logging_setup.py

from __future__ import annotations

import logging
import sys
from pathlib import Path

LOG_FILE_NAME = "timelog.log"

_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)s %(name)s: %(message)s"
_DATEFMT = "%Y-%m-%d %H:%M:%S"


class _OwnLogsFilter(logging.Filter):
    """Pass every timelog record; anything else (py.warnings, libraries) only at min_foreign+."""

    def __init__(self, min_foreign: int = logging.ERROR) -> None:
        super().__init__()
        self.min_foreign = min_foreign

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name == "timelog" or record.name.startswith("timelog."):
            return True
        return record.levelno >= self.min_foreign


def resolve_level(level: int | str, default: int = logging.INFO) -> int:
    """Accept 20, "info" or "INFO"; unknown names fall back to default."""
    if isinstance(level, int):
        return level
    value = logging.getLevelName(level.strip().upper())
    return value if isinstance(value, int) else default


def _console_handler(level: int) -> logging.Handler:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.addFilter(_OwnLogsFilter())
    return handler


def _file_handler(path: Path, level: int) -> logging.Handler:
    handler = logging.FileHandler(str(path), encoding="utf-8")
    handler.setLevel(level)
    return handler


def setup_logging(
    *,
    log_dir: str | Path = ".local/timelog",
    console_level: int | str = logging.INFO,
    file_level: int | str = logging.DEBUG,
) -> Path:
    """
    Replace the root handlers with a filtered stderr handler and a file handler
    at <log_dir>/timelog.log. Returns the log file path.
    """
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)
    log_file = log_dir / LOG_FILE_NAME

    root = logging.getLogger()
    root.setLevel(logging.DEBUG)
    for h in list(root.handlers):
        root.removeHandler(h)

    fmt = logging.Formatter(fmt=_FORMAT, datefmt=_DATEFMT)
    for handler in (
        _console_handler(resolve_level(console_level)),
        _file_handler(log_file, resolve_level(file_level, logging.DEBUG)),
    ):
        handler.setFormatter(fmt)
        root.addHandler(handler)

    logging.captureWarnings(True)
    return log_file
