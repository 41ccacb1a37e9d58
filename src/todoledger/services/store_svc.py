"""FastAPI service exposing the list store and its audit log.

Handlers are plain functions run on FastAPI's thread pool; the store's own
lock serializes them. Positions in requests are transient slot addresses: a
client must re-read the list after any removal before reusing a position.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, HTTPException, status

from todoledger.config import configure_logging, get_settings
from todoledger.errors import OutOfRangeError
from todoledger.store import TodoStore

from .schemas import (
    AppendRequest,
    AppendResponse,
    CountResponse,
    EntryResponse,
    ErrorResponse,
    EventResponse,
    EventsResponse,
    HealthResponse,
    ListResponse,
    RemoveResponse,
    ToggleResponse,
)

logger = logging.getLogger(__name__)

# Initialized in lifespan
store: Optional[TodoStore] = None


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the store on startup and close it on shutdown."""
    global store

    settings = get_settings()
    configure_logging(settings)

    store = TodoStore(settings.store.db_path)
    logger.info(f"todoledger service ready (store: {settings.store.db_path})")

    yield

    if store:
        store.close()
        store = None
        logger.info("Store closed")


app = FastAPI(
    title="todoledger",
    version="0.1.0",
    description="Position-addressed to-do list with an append-only audit log",
    lifespan=lifespan,
    responses={
        422: {"model": ErrorResponse, "description": "Validation Error"},
        500: {"model": ErrorResponse, "description": "Internal Server Error"},
    },
)


def _out_of_range(err: OutOfRangeError, action: str) -> HTTPException:
    logger.warning(f"Rejected {action}: {err}")
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail=f"No entry at position {err.position} (count={err.count})",
    )


@app.get("/health", response_model=HealthResponse)
def health():
    """Health check endpoint."""
    return HealthResponse(status="healthy", service="todoledger")


@app.get("/todos", response_model=ListResponse)
def list_todos():
    """Return every entry in position order."""
    entries = store.read_all()
    return ListResponse(
        count=len(entries),
        entries=[
            EntryResponse(position=i, text=e.text, completed=e.completed)
            for i, e in enumerate(entries)
        ],
    )


@app.get("/todos/count", response_model=CountResponse)
def count_todos():
    return CountResponse(count=store.count())


@app.post("/todos", response_model=AppendResponse, status_code=status.HTTP_201_CREATED)
def append_todo(request: AppendRequest):
    """Append an uncompleted entry at the tail.

    Text must be encodable as UTF-8: JSON escapes can smuggle in lone
    surrogates, which the store keeps but a JSON response cannot carry back.
    """
    try:
        request.text.encode("utf-8")
    except UnicodeEncodeError:
        logger.warning("Rejected append: text is not valid UTF-8")
        raise HTTPException(
            status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
            detail="text must be valid UTF-8 (lone surrogates are not allowed)",
        )

    try:
        return AppendResponse(position=store.append(request.text))
    except Exception:
        logger.exception("Unexpected error in POST /todos")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error adding todo",
        )


@app.post(
    "/todos/{position}/toggle",
    response_model=ToggleResponse,
    responses={404: {"model": ErrorResponse, "description": "Position out of range"}},
)
def toggle_todo(position: int):
    """Flip the completed flag of the entry at ``position``."""
    try:
        completed = store.toggle(position)
    except OutOfRangeError as e:
        raise _out_of_range(e, "toggle")
    except Exception:
        logger.exception(f"Unexpected error toggling position {position}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error toggling todo",
        )
    return ToggleResponse(position=position, completed=completed)


@app.delete(
    "/todos/{position}",
    response_model=RemoveResponse,
    responses={404: {"model": ErrorResponse, "description": "Position out of range"}},
)
def remove_todo(position: int):
    """Remove the entry at ``position``; later entries shift down by one."""
    try:
        store.remove(position)
    except OutOfRangeError as e:
        raise _out_of_range(e, "remove")
    except Exception:
        logger.exception(f"Unexpected error removing position {position}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Internal server error removing todo",
        )
    return RemoveResponse(position=position)


@app.get(
    "/events",
    response_model=EventsResponse,
    responses={400: {"model": ErrorResponse, "description": "Bad Request"}},
)
def list_events(since: int = 0, limit: Optional[int] = None):
    """Return audit events with ``sequence > since`` in emission order."""
    max_limit = get_settings().api.event_page_limit
    if limit is None:
        limit = max_limit
    if limit < 1 or limit > max_limit:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"limit must be between 1 and {max_limit}",
        )
    if since < 0:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="since must not be negative",
        )

    return EventsResponse(
        events=[EventResponse(**e.to_dict()) for e in store.events.events(since=since, limit=limit)]
    )
