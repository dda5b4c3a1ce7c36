"""Service for expanding recurring events into the concrete occurrences that
fall inside the calendar's viewing window."""

from __future__ import annotations

from datetime import date, datetime, time, timedelta
from typing import Callable, Iterable

from dateutil.relativedelta import relativedelta

from eventcal.domain.models import Event, RecurrenceRule, RecurrenceType
from eventcal.services.timeutils import as_date


def view_window(view_date: date | datetime) -> tuple[date, date]:
    """Return the inclusive (first, last) day of the three months around *view_date*.

    The window runs from the first day of the previous month to the last day
    of the next month, clipped to the range of representable dates.
    """
    first_of_month = as_date(view_date).replace(day=1)
    try:
        start = first_of_month - relativedelta(months=1)
    except ValueError:
        start = date.min
    try:
        end = first_of_month + relativedelta(months=2) - timedelta(days=1)
    except ValueError:
        end = date.max
    return start, end


def occurrence_id(root_id: str, day: date) -> str:
    """Derive the id of a generated occurrence from its series root.

    The suffix is the epoch timestamp (milliseconds) of local midnight on *day*,
    so ids are unique within a series and stable across expansions.
    """
    midnight = datetime.combine(day, time.min)
    return f"{root_id}-{int(midnight.timestamp() * 1000)}"


def expand_recurrence(event: Event, view_date: date | datetime) -> list[Event]:
    """Expand *event* into the occurrences visible around *view_date*.

    A non-recurring event is returned as-is. For a series root the result
    holds the root itself (when it falls in the window) plus one single-day
    copy per generated date. Generated copies carry no recurrence rule.
    The result is not sorted.
    """
    rule = event.recurrence
    if rule is None:
        return [event]

    window_start, window_end = view_window(view_date)

    def in_window(day: date) -> bool:
        return window_start <= day <= window_end

    occurrences = [event]
    seen = {event.id}
    for day in _generate_dates(event.start_date, rule, window_end):
        if day <= event.start_date or not in_window(day):
            continue
        if rule.end_date is not None and day > rule.end_date:
            continue
        occurrence = _occurrence(event, day)
        if occurrence.id in seen:
            continue
        seen.add(occurrence.id)
        occurrences.append(occurrence)

    return [e for e in occurrences if in_window(e.start_date)]


def expand_all(events: Iterable[Event], view_date: date | datetime) -> list[Event]:
    """Flatten the expansion of every event for the given view."""
    expanded: list[Event] = []
    for event in events:
        expanded.extend(expand_recurrence(event, view_date))
    return expanded


def next_weekday(day: date, weekday: int) -> date:
    """Return the first date strictly after *day* falling on *weekday*.

    Weekdays are numbered 0=Sunday through 6=Saturday.
    """
    current = (day.weekday() + 1) % 7
    days_until = (weekday - current + 7) % 7
    return day + timedelta(days=days_until or 7)


def add_months(day: date, months: int) -> date:
    """Move *day* forward by whole months keeping its day-of-month.

    Days past the end of the target month roll over into the following
    month (Jan 31 + 1 month is Mar 2 or Mar 3) instead of being clamped.
    """
    first = day.replace(day=1) + relativedelta(months=months)
    return first + timedelta(days=day.day - 1)


def with_day_of_month(day: date, day_of_month: int) -> date:
    """Set the day-of-month of *day*, rolling over past the month's end."""
    return day.replace(day=1) + timedelta(days=day_of_month - 1)


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _generate_dates(start: date, rule: RecurrenceRule, window_end: date):
    """Yield candidate dates for *rule*, stepping forward from *start*."""
    step = _STEPS.get(rule.type)
    if step is None:
        # custom rules are not implemented: nothing beyond the root
        return

    anchor = start
    while anchor <= window_end and (rule.end_date is None or anchor <= rule.end_date):
        # Stepping past date.max ends the series.
        try:
            if rule.type == RecurrenceType.WEEKLY and rule.days_of_week:
                for weekday in rule.days_of_week:
                    yield next_weekday(anchor, weekday)
                anchor = step(anchor, rule)
            else:
                anchor = step(anchor, rule)
                yield anchor
        except (OverflowError, ValueError):
            return


def _step_daily(anchor: date, rule: RecurrenceRule) -> date:
    return anchor + timedelta(days=rule.interval)


def _step_weekly(anchor: date, rule: RecurrenceRule) -> date:
    return anchor + timedelta(weeks=rule.interval)


def _step_monthly(anchor: date, rule: RecurrenceRule) -> date:
    moved = add_months(anchor, rule.interval)
    if rule.day_of_month:
        moved = with_day_of_month(moved, rule.day_of_month)
    return moved


_STEPS: dict[RecurrenceType, Callable[[date, RecurrenceRule], date]] = {
    RecurrenceType.DAILY: _step_daily,
    RecurrenceType.WEEKLY: _step_weekly,
    RecurrenceType.MONTHLY: _step_monthly,
}


def _occurrence(root: Event, day: date) -> Event:
    return root.model_copy(
        update={
            "id": occurrence_id(root.id, day),
            "start_date": day,
            "end_date": day,
            "recurrence": None,
        }
    )
