"""Append-only event log with listener fan-out.

The log shares the store's SQLite connection and lock so that a mutation and
its event row commit in the same transaction. Listeners are plain callables
notified after commit, in emission order.
"""

from __future__ import annotations

import dataclasses
import logging
import sqlite3
import threading
from collections import deque
from datetime import datetime
from typing import Callable, Deque, List, Optional

from ..schemas import decode_text, encode_text
from .events import EventKind, TodoEvent

logger = logging.getLogger(__name__)

Listener = Callable[[TodoEvent], None]


class EventLog:
    """Append-only audit trail of list mutations.

    Events are never updated or deleted. ``record`` must be called inside the
    caller's transaction; ``publish`` after it commits.

    Example:
        >>> seen = []
        >>> unsubscribe = store.events.subscribe(seen.append)
        >>> store.append("buy milk")
        0
        >>> seen[0].kind
        <EventKind.ADDED: 'added'>
        >>> unsubscribe()
    """

    def __init__(self, conn: sqlite3.Connection, lock: threading.RLock):
        self._conn = conn
        self._lock = lock
        self._listeners: List[Listener] = []
        self._pending: Deque[TodoEvent] = deque()
        self._delivering = False
        self._create_schema()

    def _create_schema(self) -> None:
        """Create the events table if it doesn't exist."""
        with self._lock, self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    sequence INTEGER PRIMARY KEY AUTOINCREMENT,
                    event_id TEXT NOT NULL UNIQUE,
                    kind TEXT NOT NULL,
                    position INTEGER NOT NULL,
                    text BLOB,
                    completed INTEGER,
                    timestamp TEXT NOT NULL
                )
            """)

    def record(self, event: TodoEvent) -> TodoEvent:
        """Insert an event row and return it with its assigned sequence."""
        cursor = self._conn.execute(
            "INSERT INTO events (event_id, kind, position, text, completed, timestamp)"
            " VALUES (?, ?, ?, ?, ?, ?)",
            (
                event.event_id,
                event.kind.value,
                event.position,
                None if event.text is None else encode_text(event.text),
                None if event.completed is None else int(event.completed),
                event.timestamp.isoformat(),
            ),
        )
        return dataclasses.replace(event, sequence=cursor.lastrowid)

    def publish(self, event: TodoEvent) -> None:
        """Deliver a committed event to every listener.

        A listener that mutates the store publishes from inside delivery.
        Such events are queued and delivered by the outermost call once the
        current event has reached every listener, so each listener sees
        sequences in increasing order.
        """
        self._pending.append(event)
        if self._delivering:
            return

        self._delivering = True
        try:
            while self._pending:
                current = self._pending.popleft()
                for listener in list(self._listeners):
                    self._deliver(listener, current)
        finally:
            self._delivering = False

    def _deliver(self, listener: Listener, event: TodoEvent) -> bool:
        try:
            listener(event)
        except Exception:
            logger.exception(f"Event listener {listener!r} failed; detaching it")
            self._detach(listener)
            return False
        return True

    def _detach(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def subscribe(self, listener: Listener, replay: bool = False) -> Callable[[], None]:
        """Register a listener for events emitted from now on.

        Args:
            listener: Callable invoked with each TodoEvent.
            replay: Deliver the stored history first. History delivery and
                registration happen under the store lock, so nothing is
                missed or seen twice.

        Returns:
            A callable that removes the listener.
        """
        with self._lock:
            if replay:
                for event in self.events():
                    if not self._deliver(listener, event):
                        return lambda: None
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                self._detach(listener)

        return unsubscribe

    def events(self, since: int = 0, limit: Optional[int] = None) -> List[TodoEvent]:
        """Return stored events with ``sequence > since`` in emission order."""
        query = "SELECT * FROM events WHERE sequence > ? ORDER BY sequence ASC"
        params: List[int] = [since]
        if limit is not None:
            query += " LIMIT ?"
            params.append(limit)

        with self._lock:
            rows = self._conn.execute(query, params).fetchall()
        return [self._row_to_event(row) for row in rows]

    def __len__(self) -> int:
        with self._lock:
            return self._conn.execute("SELECT COUNT(*) FROM events").fetchone()[0]

    @staticmethod
    def _row_to_event(row: tuple) -> TodoEvent:
        return TodoEvent(
            sequence=row[0],
            event_id=row[1],
            kind=EventKind(row[2]),
            position=row[3],
            text=None if row[4] is None else decode_text(row[4]),
            completed=None if row[5] is None else bool(row[5]),
            timestamp=datetime.fromisoformat(row[6]),
        )
