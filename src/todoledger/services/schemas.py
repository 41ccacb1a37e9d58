"""API request/response schemas for the list store service."""

from typing import List, Optional

from pydantic import BaseModel


class AppendRequest(BaseModel):
    """Text for a new entry. Empty strings are accepted."""

    text: str


class AppendResponse(BaseModel):
    position: int


class EntryResponse(BaseModel):
    """Entry with the position it occupies at read time."""

    position: int
    text: str
    completed: bool


class ListResponse(BaseModel):
    count: int
    entries: List[EntryResponse]


class CountResponse(BaseModel):
    count: int


class ToggleResponse(BaseModel):
    position: int
    completed: bool


class RemoveResponse(BaseModel):
    """Position that was removed. Later entries have shifted down by one;
    re-read the list for the current positions and count.
    """

    position: int


class EventResponse(BaseModel):
    """Audit event in the response."""

    sequence: int
    event_id: str
    kind: str
    position: int
    text: Optional[str] = None
    completed: Optional[bool] = None
    timestamp: str


class EventsResponse(BaseModel):
    events: List[EventResponse]


class ErrorResponse(BaseModel):
    detail: str


class HealthResponse(BaseModel):
    """Health check response."""

    status: str
    service: str
