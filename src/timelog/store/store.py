# src/timelog/store/store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from pathlib import Path
from typing import Any

from .errors import StorageError
from .models import Event, Task

logger = logging.getLogger(__name__)

_MEMORY = ":memory:"


class Store:
    """
    SQLite time-log store.

    Schema (created if missing, never migrated):
    - task(id, name, details)
    - event(id, task_id -> task.id, notes, time_stamp, duration)

    Connection model:
    - one connection per Store, opened in __init__ and held until close()
    - a lock serializes calls made from several threads on the same Store
    - add_task runs in a single BEGIN IMMEDIATE transaction, so the
      lookup-then-insert on task.name cannot race with another writer
    """

    def __init__(
        self,
        location: str | Path = "timelog.sqlite3",
        *,
        foreign_keys: bool = True,
        timeout: float = 30.0,
    ) -> None:
        self._location = str(location)
        self._lock = threading.Lock()
        self._conn: sqlite3.Connection | None = self._connect(
            self._location, foreign_keys=foreign_keys, timeout=timeout
        )
        try:
            self._ensure_schema()
            tasks, events = self.count_tasks(), self.count_events()
        except StorageError:
            self.close()
            raise
        logger.info("Store ready db=%s tasks=%s events=%s", self._location, tasks, events)

    @classmethod
    def open(
        cls,
        location: str | Path,
        *,
        foreign_keys: bool = True,
        timeout: float = 30.0,
    ) -> Store:
        return cls(location, foreign_keys=foreign_keys, timeout=timeout)

    def close(self) -> None:
        with self._lock:
            conn, self._conn = self._conn, None
        if conn is not None:
            conn.close()
            logger.debug("Store closed db=%s", self._location)

    def __enter__(self) -> Store:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    @property
    def location(self) -> str:
        return self._location

    # ---- low-level helpers ----

    @staticmethod
    def _connect(location: str, *, foreign_keys: bool, timeout: float) -> sqlite3.Connection:
        try:
            if location != _MEMORY:
                Path(location).parent.mkdir(parents=True, exist_ok=True)
            # Autocommit; transactions are opened explicitly where needed.
            conn = sqlite3.connect(
                location,
                timeout=timeout,
                isolation_level=None,
                check_same_thread=False,
            )
        except (OSError, sqlite3.Error) as exc:
            logger.exception("Failed to open database db=%s", location)
            raise StorageError(f"cannot open database at {location!r}") from exc

        conn.row_factory = sqlite3.Row
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")
        try:
            conn.execute(f"PRAGMA foreign_keys={'ON' if foreign_keys else 'OFF'}")
        except sqlite3.Error as exc:
            conn.close()
            raise StorageError(f"cannot configure database at {location!r}") from exc
        return conn

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StorageError(f"store is closed db={self._location}")
        return self._conn

    def _ensure_schema(self) -> None:
        conn = self._require_conn()
        try:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS task (
                    id INTEGER PRIMARY KEY,
                    name TEXT NOT NULL,
                    details TEXT
                )
                """
            )
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS event (
                    id INTEGER PRIMARY KEY,
                    task_id INTEGER,
                    notes TEXT,
                    time_stamp TEXT,
                    duration TEXT,
                    FOREIGN KEY(task_id) REFERENCES task(id)
                )
                """
            )
        except sqlite3.Error as exc:
            logger.exception("Schema creation failed db=%s", self._location)
            raise StorageError(f"cannot create schema at {self._location!r}") from exc

    @staticmethod
    def _required(row: sqlite3.Row, column: str) -> Any:
        value = row[column]
        if value is None:
            raise StorageError(f"column {column} is NULL")
        return value

    @staticmethod
    def _optional_str(value: Any) -> str | None:
        return None if value is None else str(value)

    def _row_to_event(self, row: sqlite3.Row, prefix: str = "") -> Event:
        try:
            return Event(
                id=int(self._required(row, f"{prefix}id")),
                task_id=int(self._required(row, f"{prefix}task_id")),
                notes=self._optional_str(row[f"{prefix}notes"]),
                time_stamp=str(self._required(row, f"{prefix}time_stamp")),
                duration=str(self._required(row, f"{prefix}duration")),
            )
        except (TypeError, ValueError) as exc:
            raise StorageError(f"cannot decode event row: {exc}") from exc

    @staticmethod
    def _lookup_task_id(conn: sqlite3.Connection, name: str) -> int | None:
        row = conn.execute("SELECT id FROM task WHERE name = ?", (name,)).fetchone()
        return None if row is None else int(row["id"])

    @staticmethod
    def _insert_task(conn: sqlite3.Connection, name: str) -> int:
        # details is always stored empty; the caller's text goes on the event.
        cur = conn.execute("INSERT INTO task (name, details) VALUES (?, ?)", (name, ""))
        rowid = cur.lastrowid
        if rowid is None:
            raise StorageError("SQLite did not return lastrowid for task insert")
        return int(rowid)

    @staticmethod
    def _insert_event(
        conn: sqlite3.Connection, task_id: int, notes: str, time_stamp: str, duration: str
    ) -> int:
        cur = conn.execute(
            "INSERT INTO event (task_id, notes, time_stamp, duration) VALUES (?, ?, ?, ?)",
            (task_id, notes, time_stamp, duration),
        )
        rowid = cur.lastrowid
        if rowid is None:
            raise StorageError("SQLite did not return lastrowid for event insert")
        return int(rowid)

    def _count(self, table: str) -> int:
        with self._lock:
            conn = self._require_conn()
            try:
                (n,) = conn.execute(f"SELECT COUNT(*) FROM {table}").fetchone()
            except sqlite3.Error as exc:
                raise StorageError(f"count failed table={table}") from exc
            return int(n)

    # ---- public API ----

    def count_tasks(self) -> int:
        return self._count("task")

    def count_events(self) -> int:
        return self._count("event")

    def find_task_id(self, name: str) -> int | None:
        """Id of the task whose name matches exactly (case-sensitive), or None."""
        with self._lock:
            conn = self._require_conn()
            try:
                return self._lookup_task_id(conn, name)
            except sqlite3.Error as exc:
                raise StorageError(f"task lookup failed name={name!r}") from exc

    def add_task(self, name: str, details: str, timestamp: str, duration: str) -> None:
        """
        Record one occurrence of work under task `name`.

        The task row is created on first use; every call adds exactly one event
        carrying `details` as its notes. Both inserts commit or roll back together.
        Any string is a valid name, including "" and whitespace.
        """
        with self._lock:
            conn = self._require_conn()
            try:
                conn.execute("BEGIN IMMEDIATE")
                try:
                    task_id = self._lookup_task_id(conn, name)
                    created = task_id is None
                    if task_id is None:
                        task_id = self._insert_task(conn, name)
                    event_id = self._insert_event(conn, task_id, details, timestamp, duration)
                    conn.execute("COMMIT")
                except BaseException:
                    if conn.in_transaction:
                        with contextlib.suppress(sqlite3.Error):
                            conn.execute("ROLLBACK")
                    raise
            except sqlite3.Error as exc:
                logger.exception("add_task failed name=%r", name)
                raise StorageError(f"add_task failed for {name!r}") from exc

        logger.debug(
            "Event added id=%s task_id=%s new_task=%s time_stamp=%s duration=%s",
            event_id,
            task_id,
            created,
            timestamp,
            duration,
        )

    def get_tasks(self) -> list[Task]:
        """
        Every task that has at least one event, each with its events attached.

        Tasks without events are left out: join rows with a NULL event side
        are skipped. Callers must not rely on the order of the result.
        """
        with self._lock:
            conn = self._require_conn()
            try:
                rows = conn.execute(
                    """
                    SELECT
                        task.id AS task_id,
                        task.name AS task_name,
                        task.details AS task_details,
                        event.id AS event_id,
                        event.task_id AS event_task_id,
                        event.notes AS event_notes,
                        event.time_stamp AS event_time_stamp,
                        event.duration AS event_duration
                    FROM task
                    LEFT JOIN event ON task.id = event.task_id
                    ORDER BY task.id, event.id
                    """
                ).fetchall()
            except sqlite3.Error as exc:
                logger.exception("get_tasks query failed")
                raise StorageError("get_tasks query failed") from exc

        grouped: dict[int, tuple[Task, list[Event]]] = {}
        for row in rows:
            if row["event_id"] is None:
                continue
            try:
                event = self._row_to_event(row, prefix="event_")
            except StorageError:
                logger.exception("Bad event row event_id=%s", row["event_id"])
                raise

            task_id = int(row["task_id"])
            if task_id not in grouped:
                task = Task(
                    id=task_id,
                    name=str(row["task_name"]),
                    details=self._optional_str(row["task_details"]),
                )
                grouped[task_id] = (task, [])
            grouped[task_id][1].append(event)

        out: list[Task] = []
        for task, events in grouped.values():
            task.events = events
            out.append(task)
        return out

    def get_events(self) -> list[Event]:
        with self._lock:
            conn = self._require_conn()
            try:
                rows = conn.execute(
                    "SELECT id, task_id, notes, time_stamp, duration FROM event"
                ).fetchall()
            except sqlite3.Error as exc:
                logger.exception("get_events query failed")
                raise StorageError("get_events query failed") from exc

        events: list[Event] = []
        for row in rows:
            try:
                events.append(self._row_to_event(row))
            except StorageError:
                logger.exception("Bad event row id=%s", row["id"])
                raise
        return events
