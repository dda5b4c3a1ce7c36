"""Domain models for the calendar event system."""

from __future__ import annotations

import uuid
from datetime import date, datetime, timezone
from enum import StrEnum

from pydantic import BaseModel, Field, field_validator, model_validator

_TIME_PATTERN = r"^([01]?\d|2[0-3]):[0-5]\d$"


class RecurrenceType(StrEnum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    CUSTOM = "custom"


class ConflictKind(StrEnum):
    OVERLAP = "overlap"
    SAME_TIME = "same_time"


class TimelineEntryType(StrEnum):
    CREATED = "created"
    UPDATED = "updated"
    MOVED = "moved"
    DELETED = "deleted"
    CONFLICT_DETECTED = "conflict_detected"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


# ---------------------------------------------------------------------------
# Core domain models
# ---------------------------------------------------------------------------


class RecurrenceRule(BaseModel):
    type: RecurrenceType
    interval: int = 1
    end_date: date | None = None
    days_of_week: list[int] | None = None
    day_of_month: int | None = Field(default=None, ge=1, le=31)

    @field_validator("interval", mode="before")
    @classmethod
    def _positive_interval(cls, value):
        # Anything that is not a positive whole number means "every 1".
        try:
            interval = int(value)
        except (TypeError, ValueError):
            return 1
        return interval if interval > 0 else 1

    @field_validator("days_of_week")
    @classmethod
    def _valid_weekdays(cls, value: list[int] | None) -> list[int] | None:
        if value is None:
            return None
        for day in value:
            if not 0 <= day <= 6:
                raise ValueError("days_of_week entries must be between 0 and 6")
        return value


class EventDraft(BaseModel):
    """Everything an Event carries except its id."""

    title: str = Field(min_length=1)
    description: str | None = None
    start_date: date
    end_date: date
    start_time: str | None = Field(default=None, pattern=_TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=_TIME_PATTERN)
    category_id: str
    is_all_day: bool = False
    recurrence: RecurrenceRule | None = None

    @model_validator(mode="after")
    def _end_not_before_start(self) -> EventDraft:
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class Event(EventDraft):
    id: str = Field(default_factory=_new_id)

    @classmethod
    def from_draft(cls, draft: EventDraft, event_id: str | None = None) -> Event:
        data = draft.model_dump()
        if event_id is not None:
            data["id"] = event_id
        return cls(**data)


class Category(BaseModel):
    id: str = Field(default_factory=_new_id)
    name: str = Field(min_length=1)
    color: str = "#3B82F6"


class Conflict(BaseModel):
    event1: Event
    event2: Event
    kind: ConflictKind


class TimelineEntry(BaseModel):
    id: str = Field(default_factory=_new_id)
    event_id: str
    timestamp: datetime = Field(default_factory=_utcnow)
    type: TimelineEntryType
    payload: dict = Field(default_factory=dict)


# ---------------------------------------------------------------------------
# Request / Response DTOs
# ---------------------------------------------------------------------------


class CategoryDraft(BaseModel):
    name: str = Field(min_length=1)
    color: str = "#3B82F6"

    @field_validator("name")
    @classmethod
    def _strip_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("name must not be blank")
        return value


class MoveEventRequest(BaseModel):
    new_date: date
    new_time: str | None = Field(default=None, pattern=_TIME_PATTERN)


class ConflictCheckRequest(BaseModel):
    candidate: Event
    view_date: date | None = None


class EventMutationResponse(BaseModel):
    event: Event
    conflicts: list[Conflict] = Field(default_factory=list)


class EventView(Event):
    """An occurrence as shown on the calendar, with its display time."""

    time_label: str = ""


class GridDay(BaseModel):
    day: date
    in_month: bool
    events: list[EventView] = Field(default_factory=list)


class AgendaDay(BaseModel):
    day: date
    label: str
    events: list[EventView] = Field(default_factory=list)
