"""Event definitions for the list store audit log."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, Optional
import uuid


class EventKind(str, Enum):
    """Kinds of mutation recorded in the audit log."""

    ADDED = "added"
    TOGGLED = "toggled"
    REMOVED = "removed"


@dataclass(frozen=True)
class TodoEvent:
    """Immutable record of a single list mutation.

    Attributes:
        kind: Which mutation happened.
        position: Slot position at the time of the mutation. For REMOVED this
            is the position before the later entries shifted down.
        sequence: 1-based emission number assigned by the store.
        text: The appended text (ADDED only).
        completed: The resulting flag (TOGGLED only).
        event_id: Auto-generated UUID for this event.
        timestamp: UTC timestamp of emission.
    """

    kind: EventKind
    position: int
    sequence: int = 0
    text: Optional[str] = None
    completed: Optional[bool] = None
    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def added(cls, position: int, text: str) -> "TodoEvent":
        return cls(kind=EventKind.ADDED, position=position, text=text)

    @classmethod
    def toggled(cls, position: int, completed: bool) -> "TodoEvent":
        return cls(kind=EventKind.TOGGLED, position=position, completed=completed)

    @classmethod
    def removed(cls, position: int) -> "TodoEvent":
        return cls(kind=EventKind.REMOVED, position=position)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to a JSON-friendly dictionary."""
        return {
            "sequence": self.sequence,
            "event_id": self.event_id,
            "kind": self.kind.value,
            "position": self.position,
            "text": self.text,
            "completed": self.completed,
            "timestamp": self.timestamp.isoformat(),
        }
