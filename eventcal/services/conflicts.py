"""Service for detecting scheduling conflicts between events."""

from __future__ import annotations

from eventcal.domain.models import Conflict, ConflictKind, Event
from eventcal.services.timeutils import is_same_day, time_to_minutes


def detect_conflicts(candidate: Event, existing: list[Event]) -> list[Conflict]:
    """Return one Conflict per existing event that overlaps *candidate*.

    Only events starting on the same calendar day can conflict. All-day events
    occupy the whole day; timed events are compared as half-open minute ranges,
    so an event ending at 10:00 does not clash with one starting at 10:00.
    The caller is responsible for leaving *candidate* itself out of *existing*.
    """
    return [
        Conflict(
            event1=candidate,
            event2=other,
            kind=(
                ConflictKind.SAME_TIME
                if event_times_equal(candidate, other)
                else ConflictKind.OVERLAP
            ),
        )
        for other in existing
        if events_overlap(candidate, other)
    ]


def events_overlap(first: Event, second: Event) -> bool:
    if not is_same_day(first.start_date, second.start_date):
        return False
    if first.is_all_day or second.is_all_day:
        return True
    if not first.start_time or not second.start_time:
        return False

    start1, end1 = _minute_range(first)
    start2, end2 = _minute_range(second)
    return start1 < end2 and start2 < end1


def event_times_equal(first: Event, second: Event) -> bool:
    return first.start_time == second.start_time and first.end_time == second.end_time


def _minute_range(event: Event) -> tuple[int, int]:
    # A missing end time makes a zero-width range at the start time.
    start = time_to_minutes(event.start_time)
    end = time_to_minutes(event.end_time or event.start_time)
    return start, end
