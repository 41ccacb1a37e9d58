"""todoledger: a position-addressed to-do list with an append-only audit log."""

from .errors import OutOfRangeError, ReplayError, TodoLedgerError
from .schemas import Entry
from .store import TodoStore

__all__ = ["Entry", "TodoStore", "TodoLedgerError", "OutOfRangeError", "ReplayError"]
