import random

import pytest

from todoledger.audit.events import EventKind, TodoEvent
from todoledger.audit.replay import replay
from todoledger.errors import ReplayError
from todoledger.schemas import Entry
from todoledger.store import TodoStore


def test_replay_empty_stream():
    assert replay([]) == []


def test_replay_reconstructs_store():
    store = TodoStore(":memory:")
    store.append("a")
    store.append("b")
    store.append("c")
    store.toggle(2)
    store.remove(0)
    store.toggle(0)
    store.append("d")

    assert replay(store.events.events()) == store.read_all()
    store.close()


def test_replay_matches_random_workload():
    rng = random.Random(7)
    store = TodoStore(":memory:")

    for step in range(200):
        count = store.count()
        op = rng.choice(["append", "append", "toggle", "remove"])
        if op == "append" or count == 0:
            store.append(f"item-{step}")
        elif op == "toggle":
            store.toggle(rng.randrange(count))
        else:
            store.remove(rng.randrange(count))

    assert replay(store.events.events()) == store.read_all()
    store.close()


def test_replay_uses_position_as_of_that_point():
    events = [
        TodoEvent.added(0, "a"),
        TodoEvent.added(1, "b"),
        TodoEvent.removed(0),
        TodoEvent.toggled(0, True),
    ]
    assert replay(events) == [Entry(text="b", completed=True)]


def test_replay_rejects_added_not_at_tail():
    with pytest.raises(ReplayError):
        replay([TodoEvent.added(1, "a")])


@pytest.mark.parametrize(
    "event",
    [TodoEvent.toggled(0, True), TodoEvent.removed(0)],
)
def test_replay_rejects_missing_slot(event):
    with pytest.raises(ReplayError) as exc_info:
        replay([event])
    assert exc_info.value.details["count"] == 0


def test_replay_error_message_includes_details():
    with pytest.raises(ReplayError) as exc_info:
        replay([TodoEvent(kind=EventKind.REMOVED, position=4, sequence=9)])
    assert "sequence=9" in str(exc_info.value)
