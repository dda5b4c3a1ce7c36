"""Shared helpers for "HH:MM" time strings and calendar-day comparisons."""

from __future__ import annotations

from datetime import date, datetime

from eventcal.domain.models import Event


def as_date(value: date | datetime) -> date:
    """Drop the time part of a datetime; plain dates pass through."""
    if isinstance(value, datetime):
        return value.date()
    return value


def time_to_minutes(value: str) -> int:
    """Convert an "HH:MM" string into minutes since midnight.

    The string is assumed to be well formed; validation happens on the models.
    """
    hours, minutes = value.split(":")
    return int(hours) * 60 + int(minutes)


def format_time(value: str) -> str:
    hours, minutes = (int(part) for part in value.split(":"))
    period = "PM" if hours >= 12 else "AM"
    display_hours = hours % 12 or 12
    return f"{display_hours}:{minutes:02d} {period}"


def format_event_time(event: Event) -> str:
    """Human-readable time span for an event, e.g. ``9:00 AM - 10:30 AM``."""
    if event.is_all_day:
        return "All day"
    if not event.start_time:
        return ""

    start = format_time(event.start_time)
    if event.end_time:
        return f"{start} - {format_time(event.end_time)}"
    return start


def is_same_day(first: date | datetime, second: date | datetime) -> bool:
    return as_date(first) == as_date(second)


def format_date(value: date | datetime) -> str:
    """Long form date such as ``Monday, January 1, 2024``."""
    day = as_date(value)
    return f"{day:%A}, {day:%B} {day.day}, {day.year}"
