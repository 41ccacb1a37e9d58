"""Position-addressed to-do list store with an attached audit log.

Entries live in SQLite slots keyed by position. Positions are contiguous
(``0..count-1``) and transient: removing a slot shifts every later entry one
slot toward the front, so a position cached before a removal may address a
different entry afterwards.

Every mutation and its audit event commit in one transaction under one lock,
so observers on any thread see each operation as an atomic unit.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from typing import Any, List

from .audit.events import TodoEvent
from .audit.log import EventLog
from .errors import OutOfRangeError
from .schemas import Entry, decode_text, encode_text

logger = logging.getLogger(__name__)


class TodoStore:
    """Ordered list of Entries addressed by zero-based position.

    Example:
        >>> store = TodoStore(":memory:")
        >>> store.append("a")
        0
        >>> store.append("b")
        1
        >>> store.toggle(0)
        True
        >>> store.remove(0)
        >>> store.read_all()
        [Entry(text='b', completed=False)]
    """

    def __init__(self, db_path: str = ":memory:"):
        """Open (or create) a store.

        Args:
            db_path: Path to SQLite database file. Use ":memory:" for a store
                that lives as long as this object.
        """
        self.db_path = db_path
        self._lock = threading.RLock()
        self._conn = sqlite3.connect(db_path, check_same_thread=False)
        self._create_schema()
        self.events = EventLog(self._conn, self._lock)
        logger.info(f"Opened todo store at {db_path} with {self.count()} entries")

    def _create_schema(self) -> None:
        with self._lock, self._conn:
            self._conn.execute("""
                CREATE TABLE IF NOT EXISTS slots (
                    position INTEGER PRIMARY KEY,
                    text BLOB NOT NULL,
                    completed INTEGER NOT NULL
                )
            """)

    def _count(self) -> int:
        return self._conn.execute("SELECT COUNT(*) FROM slots").fetchone()[0]

    @staticmethod
    def _check_position(position: Any, count: int) -> None:
        if isinstance(position, bool) or not isinstance(position, int):
            raise OutOfRangeError(position, count)
        if not 0 <= position < count:
            raise OutOfRangeError(position, count)

    def append(self, text: str) -> int:
        """Add an uncompleted entry at the tail.

        Args:
            text: Entry text. Any string, including the empty string.

        Returns:
            The new entry's position.
        """
        with self._lock:
            with self._conn:
                position = self._count()
                self._conn.execute(
                    "INSERT INTO slots (position, text, completed) VALUES (?, ?, 0)",
                    (position, encode_text(text)),
                )
                event = self.events.record(TodoEvent.added(position, text))
            logger.debug(f"Appended entry at position {position}")
            self.events.publish(event)
        return position

    def toggle(self, position: int) -> bool:
        """Flip the completed flag of the entry at ``position``.

        Returns:
            The resulting flag.

        Raises:
            OutOfRangeError: If ``position`` is not in ``[0, count)``.
        """
        with self._lock:
            with self._conn:
                self._check_position(position, self._count())
                (current,) = self._conn.execute(
                    "SELECT completed FROM slots WHERE position = ?", (position,)
                ).fetchone()
                completed = not bool(current)
                self._conn.execute(
                    "UPDATE slots SET completed = ? WHERE position = ?",
                    (int(completed), position),
                )
                event = self.events.record(TodoEvent.toggled(position, completed))
            logger.debug(f"Toggled entry at position {position} to {completed}")
            self.events.publish(event)
        return completed

    def remove(self, position: int) -> None:
        """Delete the entry at ``position`` and compact the list.

        Every later entry moves one slot toward the front, then the tail slot
        is dropped. Order of the remaining entries is preserved.

        Raises:
            OutOfRangeError: If ``position`` is not in ``[0, count)``.
        """
        with self._lock:
            with self._conn:
                count = self._count()
                self._check_position(position, count)
                for slot in range(position, count - 1):
                    text, completed = self._conn.execute(
                        "SELECT text, completed FROM slots WHERE position = ?",
                        (slot + 1,),
                    ).fetchone()
                    self._conn.execute(
                        "UPDATE slots SET text = ?, completed = ? WHERE position = ?",
                        (text, completed, slot),
                    )
                self._conn.execute("DELETE FROM slots WHERE position = ?", (count - 1,))
                event = self.events.record(TodoEvent.removed(position))
            logger.debug(f"Removed entry at position {position}; {count - 1} remain")
            self.events.publish(event)

    def read_all(self) -> List[Entry]:
        """Return a snapshot of all entries in position order."""
        with self._lock:
            rows = self._conn.execute(
                "SELECT text, completed FROM slots ORDER BY position ASC"
            ).fetchall()
        return [
            Entry(text=decode_text(text), completed=bool(completed))
            for text, completed in rows
        ]

    def count(self) -> int:
        """Return the number of live entries."""
        with self._lock:
            return self._count()

    def close(self) -> None:
        """Close the database connection.

        For in-memory stores the data is lost.
        """
        with self._lock:
            self._conn.close()
            logger.info(f"Closed todo store at {self.db_path}")

    def __enter__(self) -> "TodoStore":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()
