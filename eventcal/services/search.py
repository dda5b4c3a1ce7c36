"""Helpers that shape expanded occurrences for the calendar views."""

from __future__ import annotations

from datetime import date, datetime, timedelta
from typing import Iterable

from eventcal.domain.models import Event
from eventcal.services.timeutils import as_date, is_same_day

GRID_DAYS = 42  # 6 weeks x 7 days


def filter_events(
    events: Iterable[Event],
    search_term: str = "",
    category_ids: Iterable[str] | None = None,
) -> list[Event]:
    """Return events matching a free-text term and a category selection.

    The term is matched case-insensitively against title and description.
    An empty category selection means "all categories".
    """
    term = (search_term or "").lower()
    selected = set(category_ids or ())

    def matches(event: Event) -> bool:
        matches_search = term in event.title.lower() or (
            event.description is not None and term in event.description.lower()
        )
        matches_category = not selected or event.category_id in selected
        return matches_search and matches_category

    return [event for event in events if matches(event)]


def events_for_date(events: Iterable[Event], day: date | datetime) -> list[Event]:
    return [event for event in events if is_same_day(event.start_date, day)]


def month_grid(view_date: date | datetime) -> list[date]:
    """Return the 42 days shown on the month grid for *view_date*.

    The grid starts on the Sunday on or before the first of the month and
    pads into the following month.
    """
    first = as_date(view_date).replace(day=1)
    leading = (first.weekday() + 1) % 7
    grid_start = first - timedelta(days=leading)
    return [grid_start + timedelta(days=offset) for offset in range(GRID_DAYS)]


def group_by_date(events: Iterable[Event]) -> list[tuple[date, list[Event]]]:
    """Group events by start date, earliest date first."""
    groups: dict[date, list[Event]] = {}
    for event in events:
        groups.setdefault(event.start_date, []).append(event)
    return sorted(groups.items(), key=lambda item: item[0])
