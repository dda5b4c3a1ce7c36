"""Domain events emitted when the stored calendar changes."""

from __future__ import annotations

from datetime import date

from pydantic import BaseModel


class EventCreated(BaseModel):
    """Fired when a new Event is stored."""

    event_id: str


class EventUpdated(BaseModel):
    """Fired when an existing Event is edited."""

    event_id: str


class EventMoved(BaseModel):
    """Fired when an Event is dragged to another day (or time)."""

    event_id: str
    from_date: date
    to_date: date
    start_time: str | None = None


class EventDeleted(BaseModel):
    event_id: str
    title: str


class ConflictDetected(BaseModel):
    """Fired when a change was committed despite overlapping other events."""

    event_id: str
    conflicting_event_ids: list[str]
