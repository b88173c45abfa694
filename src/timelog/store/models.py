# src/timelog/store/models.py

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True)
class Event:
    id: int
    task_id: int
    notes: str | None
    time_stamp: str
    duration: str


@dataclass(slots=True)
class Task:
    """
    A named unit of work.

    Notes:
    - `events` is only filled by Store.get_tasks(); a Task read from its own
      table row keeps it as None.
    - `details` is stored as "" on creation.
    """

    id: int
    name: str
    details: str | None = None
    events: list[Event] | None = None
