"""Audit module for the append-only mutation log."""

from .events import EventKind, TodoEvent
from .log import EventLog
from .replay import replay

__all__ = ["EventKind", "TodoEvent", "EventLog", "replay"]
