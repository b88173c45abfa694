"""
Time-tracking persistence layer.

Components:
- store/: SQLite-backed storage of tasks and their logged events
- api.py: caller-side helpers (open_store, log_work, format_duration)
- config.py: settings loaded from TIMELOG_* environment variables
- logging_setup.py: console + file logging
"""

from .store import Event, StorageError, Store, Task

__all__ = ["Event", "StorageError", "Store", "Task"]
