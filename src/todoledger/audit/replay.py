"""Rebuild a list from its audit trail."""

from __future__ import annotations

from typing import Iterable, List

from ..errors import ReplayError
from ..schemas import Entry
from .events import EventKind, TodoEvent


def replay(events: Iterable[TodoEvent]) -> List[Entry]:
    """Apply events in order to an empty list and return the result.

    ADDED appends at the tail, TOGGLED sets the recorded flag at its position
    as of that point in the replay, REMOVED deletes and compacts.

    Raises:
        ReplayError: If an event does not fit the state reached so far.
    """
    entries: List[Entry] = []
    for event in events:
        if event.kind == EventKind.ADDED:
            if event.position != len(entries):
                raise ReplayError(
                    "Added event is not at the tail",
                    {"sequence": event.sequence, "position": event.position, "count": len(entries)},
                )
            entries.append(Entry(text=event.text or "", completed=False))
            continue

        if not 0 <= event.position < len(entries):
            raise ReplayError(
                f"{event.kind.value.capitalize()} event addresses a missing slot",
                {"sequence": event.sequence, "position": event.position, "count": len(entries)},
            )

        if event.kind == EventKind.TOGGLED:
            current = entries[event.position]
            completed = (not current.completed) if event.completed is None else event.completed
            entries[event.position] = Entry(text=current.text, completed=completed)
        elif event.kind == EventKind.REMOVED:
            del entries[event.position]
        else:
            raise ReplayError("Unknown event kind", {"kind": event.kind})

    return entries
