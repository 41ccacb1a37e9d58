import pytest
from fastapi.testclient import TestClient

from todoledger.services.store_svc import app


@pytest.fixture
def client():
    # Use context manager to properly invoke lifespan events
    with TestClient(app) as client:
        yield client


def _add(client, text):
    response = client.post("/todos", json={"text": text})
    assert response.status_code == 201
    return response.json()["position"]


def test_health_endpoint(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_empty_list(client):
    response = client.get("/todos")
    assert response.status_code == 200
    assert response.json() == {"count": 0, "entries": []}
    assert client.get("/todos/count").json() == {"count": 0}


def test_append_and_list(client):
    assert _add(client, "a") == 0
    assert _add(client, "") == 1

    data = client.get("/todos").json()
    assert data["count"] == 2
    assert data["entries"] == [
        {"position": 0, "text": "a", "completed": False},
        {"position": 1, "text": "", "completed": False},
    ]


def test_toggle_endpoint(client):
    _add(client, "a")

    response = client.post("/todos/0/toggle")
    assert response.status_code == 200
    assert response.json() == {"position": 0, "completed": True}

    response = client.post("/todos/0/toggle")
    assert response.json()["completed"] is False


def test_remove_endpoint_shifts_positions(client):
    for text in ["a", "b", "c"]:
        _add(client, text)

    response = client.delete("/todos/0")
    assert response.status_code == 200
    assert response.json() == {"position": 0}

    entries = client.get("/todos").json()["entries"]
    assert [(e["position"], e["text"]) for e in entries] == [(0, "b"), (1, "c")]


@pytest.mark.parametrize("position", [5, -1])
def test_out_of_range_returns_404_without_mutation(client, position):
    _add(client, "a")

    assert client.post(f"/todos/{position}/toggle").status_code == 404
    response = client.delete(f"/todos/{position}")
    assert response.status_code == 404
    assert "position" in response.json()["detail"]

    assert client.get("/todos").json()["entries"] == [
        {"position": 0, "text": "a", "completed": False}
    ]
    assert len(client.get("/events").json()["events"]) == 1


def test_invalid_requests_are_rejected(client):
    assert client.post("/todos", json={}).status_code == 422
    assert client.post("/todos/abc/toggle").status_code == 422


def test_events_endpoint(client):
    _add(client, "a")
    _add(client, "b")
    client.post("/todos/1/toggle")
    client.delete("/todos/0")

    events = client.get("/events").json()["events"]
    assert [(e["kind"], e["position"]) for e in events] == [
        ("added", 0),
        ("added", 1),
        ("toggled", 1),
        ("removed", 0),
    ]
    assert events[2]["completed"] is True

    later = client.get("/events", params={"since": 2}).json()["events"]
    assert [e["sequence"] for e in later] == [3, 4]

    page = client.get("/events", params={"limit": 1}).json()["events"]
    assert len(page) == 1


def test_events_endpoint_validates_bounds(client):
    assert client.get("/events", params={"limit": 0}).status_code == 400
    assert client.get("/events", params={"limit": 100000}).status_code == 400
    assert client.get("/events", params={"since": -1}).status_code == 400


def test_each_lifespan_opens_fresh_memory_store():
    with TestClient(app) as client:
        _add(client, "a")
    with TestClient(app) as client:
        assert client.get("/todos/count").json() == {"count": 0}


def test_append_rejects_text_that_is_not_utf8(client):
    response = client.post(
        "/todos",
        content=b'{"text": "\\ud800"}',
        headers={"Content-Type": "application/json"},
    )
    assert response.status_code == 422
    assert "UTF-8" in response.json()["detail"]

    assert client.get("/todos/count").json() == {"count": 0}
    assert client.get("/events").json()["events"] == []


def test_remove_response_carries_only_removed_position(client):
    _add(client, "a")
    _add(client, "b")

    response = client.delete("/todos/1")
    assert response.json() == {"position": 1}
    assert client.get("/todos/count").json() == {"count": 1}
