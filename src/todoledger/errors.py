"""Exception hierarchy for todoledger.

All exceptions inherit from TodoLedgerError so callers can catch the
whole family at once.
"""

from __future__ import annotations

from typing import Any, Dict, Optional


class TodoLedgerError(Exception):
    """Base exception for all todoledger errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class OutOfRangeError(TodoLedgerError, IndexError):
    """Raised when a position does not address a live slot.

    Valid positions are ``0 <= position < count``. The store is left
    untouched when this is raised.
    """

    def __init__(self, position: Any, count: int):
        super().__init__(
            "Position out of range",
            {"position": position, "count": count},
        )
        self.position = position
        self.count = count


class ReplayError(TodoLedgerError):
    """Raised when an event stream cannot be applied to the replayed state."""
