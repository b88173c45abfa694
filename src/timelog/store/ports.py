# src/timelog/store/ports.py

"""
Port used by caller-side helpers.

Helpers depend on this Protocol instead of the concrete Store, which keeps
them usable with an in-memory fake in tests.
"""

from __future__ import annotations

from typing import Protocol

from .models import Event, Task


class TimeLogRepo(Protocol):
    def add_task(self, name: str, details: str, timestamp: str, duration: str) -> None: ...

    def get_tasks(self) -> list[Task]: ...

    def get_events(self) -> list[Event]: ...
