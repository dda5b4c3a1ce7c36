"""FastAPI application — entry point for the event calendar service."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import FastAPI, HTTPException, Query

from eventcal.config import settings
from eventcal.domain.bus import EventBus
from eventcal.domain.events import (
    ConflictDetected,
    EventCreated,
    EventDeleted,
    EventMoved,
    EventUpdated,
)
from eventcal.domain.handlers import HandlerRegistry
from eventcal.domain.models import (
    AgendaDay,
    Category,
    CategoryDraft,
    Conflict,
    ConflictCheckRequest,
    Event,
    EventDraft,
    EventMutationResponse,
    EventView,
    GridDay,
    MoveEventRequest,
    TimelineEntry,
)
from eventcal.repos.memory import (
    EventRepository,
    TimelineRepository,
    create_category_repository,
)
from eventcal.services.conflicts import detect_conflicts
from eventcal.services.recurrence import expand_all
from eventcal.services.search import (
    events_for_date,
    filter_events,
    group_by_date,
    month_grid,
)
from eventcal.services.timeutils import format_date, format_event_time

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title=settings.app_title)

# ── Singletons (created at import time for simplicity) ────────────────
event_bus = EventBus()
event_repo = EventRepository()
category_repo = create_category_repository(seed=settings.seed_categories)
timeline_repo = TimelineRepository()

handler_registry = HandlerRegistry(
    bus=event_bus,
    event_repo=event_repo,
    timeline_repo=timeline_repo,
)


def _visible_events(
    view_date: date,
    search_term: str = "",
    category_ids: list[str] | None = None,
) -> list[Event]:
    """Expand every stored event around *view_date*, then apply the filters."""
    expanded = expand_all(event_repo.list_all(), view_date)
    return filter_events(expanded, search_term, category_ids)


def _expanded_except(series_id: str | None, view_date: date) -> list[Event]:
    """Expand every stored event except the series rooted at *series_id*.

    Leaving the root out before expansion also drops its own generated
    occurrences, so an edited or moved series never conflicts with itself.
    """
    roots = [e for e in event_repo.list_all() if e.id != series_id]
    return expand_all(roots, view_date)


def _views(events: list[Event]) -> list[EventView]:
    return [
        EventView(**event.model_dump(), time_label=format_event_time(event))
        for event in events
    ]


def _conflicts_for(
    candidate: Event,
    exclude_id: str | None = None,
    force: bool = False,
    action: str = "This event",
) -> list[Conflict]:
    """Check *candidate* against everything visible around its start date.

    Raises a 409 when there are conflicts and the caller has not forced the
    change through.
    """
    others = _expanded_except(exclude_id, candidate.start_date)
    conflicts = detect_conflicts(candidate, others)
    if conflicts and not force:
        logger.info(
            "Rejecting change to %s: %d conflict(s)", candidate.id, len(conflicts)
        )
        raise HTTPException(
            status_code=409,
            detail={
                "message": (
                    f"{action} conflicts with {len(conflicts)} other event(s)"
                ),
                "conflicts": [c.model_dump(mode="json") for c in conflicts],
            },
        )
    return conflicts


def _publish_conflicts(event_id: str, conflicts: list[Conflict]) -> None:
    if conflicts:
        event_bus.publish(
            ConflictDetected(
                event_id=event_id,
                conflicting_event_ids=[c.event2.id for c in conflicts],
            )
        )


def _get_event_or_404(event_id: str) -> Event:
    event = event_repo.get(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return event


# ── Categories ────────────────────────────────────────────────────────


@app.get("/categories", response_model=list[Category])
def list_categories() -> list[Category]:
    return category_repo.list_all()


@app.post("/categories", response_model=Category, status_code=201)
def create_category(body: CategoryDraft) -> Category:
    category = Category(name=body.name, color=body.color)
    category_repo.add(category)
    return category


# ── Events ────────────────────────────────────────────────────────────


@app.get("/events", response_model=list[Event])
def list_events() -> list[Event]:
    """Return all stored events (series roots, not expanded)."""
    return event_repo.list_all()


@app.get("/events/{event_id}", response_model=Event)
def get_event(event_id: str) -> Event:
    return _get_event_or_404(event_id)


@app.post("/events", response_model=EventMutationResponse, status_code=201)
def create_event(body: EventDraft, force: bool = False) -> EventMutationResponse:
    """Store a new event.

    Overlapping events cause a 409 unless ``force=true`` is passed, in which
    case the event is stored and the conflicts are reported back.
    """
    event = Event.from_draft(body)
    conflicts = _conflicts_for(event, force=force)

    event_repo.add(event)
    event_bus.publish(EventCreated(event_id=event.id))
    _publish_conflicts(event.id, conflicts)
    return EventMutationResponse(event=event, conflicts=conflicts)


@app.put("/events/{event_id}", response_model=EventMutationResponse)
def update_event(
    event_id: str, body: EventDraft, force: bool = False
) -> EventMutationResponse:
    _get_event_or_404(event_id)
    updated = Event.from_draft(body, event_id=event_id)
    conflicts = _conflicts_for(updated, exclude_id=event_id, force=force)

    event_repo.replace(updated)
    event_bus.publish(EventUpdated(event_id=event_id))
    _publish_conflicts(event_id, conflicts)
    return EventMutationResponse(event=updated, conflicts=conflicts)


@app.post("/events/{event_id}/move", response_model=EventMutationResponse)
def move_event(
    event_id: str, body: MoveEventRequest, force: bool = False
) -> EventMutationResponse:
    """Reschedule an event onto a single day, e.g. after a drag-and-drop.

    The time of day is kept unless a new one is given.
    """
    stored = _get_event_or_404(event_id)
    moved = stored.model_copy(
        update={
            "start_date": body.new_date,
            "end_date": body.new_date,
            "start_time": body.new_time or stored.start_time,
        }
    )
    conflicts = _conflicts_for(
        moved, exclude_id=event_id, force=force, action="Moving this event"
    )

    event_repo.replace(moved)
    event_bus.publish(
        EventMoved(
            event_id=event_id,
            from_date=stored.start_date,
            to_date=moved.start_date,
            start_time=moved.start_time,
        )
    )
    _publish_conflicts(event_id, conflicts)
    return EventMutationResponse(event=moved, conflicts=conflicts)


@app.delete("/events/{event_id}", status_code=204)
def delete_event(event_id: str) -> None:
    event = event_repo.delete(event_id)
    if event is None:
        raise HTTPException(status_code=404, detail="Event not found")
    event_bus.publish(EventDeleted(event_id=event.id, title=event.title))


@app.get("/events/{event_id}/timeline", response_model=list[TimelineEntry])
def get_event_timeline(event_id: str) -> list[TimelineEntry]:
    """Return the activity history for an event, oldest first."""
    entries = timeline_repo.list_for_event(event_id)
    if not entries and event_repo.get(event_id) is None:
        raise HTTPException(status_code=404, detail="Event not found")
    return entries


# ── Calendar views ────────────────────────────────────────────────────


@app.get("/calendar", response_model=list[Event])
def get_calendar(
    view_date: date | None = None,
    q: str = "",
    category_id: list[str] | None = Query(default=None),
) -> list[Event]:
    """Return the occurrences visible around *view_date* (default: today)."""
    return _visible_events(view_date or date.today(), q, category_id)


@app.get("/calendar/grid", response_model=list[GridDay])
def get_month_grid(
    view_date: date | None = None,
    q: str = "",
    category_id: list[str] | None = Query(default=None),
) -> list[GridDay]:
    """Return the 42-day month grid with each day's occurrences."""
    view_date = view_date or date.today()
    visible = _visible_events(view_date, q, category_id)
    return [
        GridDay(
            day=day,
            in_month=(day.year, day.month) == (view_date.year, view_date.month),
            events=_views(events_for_date(visible, day)),
        )
        for day in month_grid(view_date)
    ]


@app.get("/calendar/agenda", response_model=list[AgendaDay])
def get_agenda(
    view_date: date | None = None,
    q: str = "",
    category_id: list[str] | None = Query(default=None),
) -> list[AgendaDay]:
    """Return visible occurrences grouped by day, earliest first."""
    visible = _visible_events(view_date or date.today(), q, category_id)
    return [
        AgendaDay(day=day, label=format_date(day), events=_views(events))
        for day, events in group_by_date(visible)
    ]


@app.post("/conflicts/check", response_model=list[Conflict])
def check_conflicts(body: ConflictCheckRequest) -> list[Conflict]:
    """Classify a candidate against the stored calendar without saving anything."""
    view_date = body.view_date or body.candidate.start_date
    others = _expanded_except(body.candidate.id, view_date)
    return detect_conflicts(body.candidate, others)
