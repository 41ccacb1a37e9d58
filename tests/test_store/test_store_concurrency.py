import threading

from todoledger.audit.events import EventKind
from todoledger.store import TodoStore


def test_concurrent_appends_keep_positions_contiguous():
    store = TodoStore(":memory:")
    errors = []
    positions = []
    positions_lock = threading.Lock()

    def append_25(name):
        try:
            for i in range(25):
                pos = store.append(f"{name}-{i}")
                with positions_lock:
                    positions.append(pos)
        except Exception as e:
            errors.append(str(e))

    threads = [threading.Thread(target=append_25, args=(f"t{n}",)) for n in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert errors == []
    assert sorted(positions) == list(range(100))
    assert store.count() == 100

    events = store.events.events()
    assert [e.sequence for e in events] == list(range(1, 101))
    assert all(e.kind == EventKind.ADDED for e in events)
    assert [e.position for e in events] == list(range(100))
    store.close()


def test_listener_sees_events_in_commit_order_across_threads():
    store = TodoStore(":memory:")
    seen = []
    store.events.subscribe(seen.append)

    def work():
        for _ in range(10):
            store.append("x")
            store.toggle(0)

    threads = [threading.Thread(target=work) for _ in range(3)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert [e.sequence for e in seen] == list(range(1, 61))
    store.close()
