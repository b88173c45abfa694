"""
Storage subsystem.

Components:
- models.py: data structures (Task, Event)
- errors.py: StorageError
- store.py: SQLite-backed Store (schema, add_task, get_tasks, get_events)
- ports.py: TimeLogRepo protocol used by callers
"""

from .errors import StorageError
from .models import Event, Task
from .store import Store

__all__ = ["Event", "StorageError", "Store", "Task"]
