"""Tests for search, filtering and calendar view helpers."""

from datetime import date

from eventcal.domain.models import Event
from eventcal.services.search import (
    events_for_date,
    filter_events,
    group_by_date,
    month_grid,
)


def _event(title: str, day: date, category_id: str = "1", **overrides) -> Event:
    return Event(
        title=title,
        start_date=day,
        end_date=day,
        category_id=category_id,
        **overrides,
    )


EVENTS = [
    _event("Team standup", date(2024, 3, 4), "1"),
    _event("Yoga", date(2024, 3, 5), "3", description="Bring the MAT"),
    _event("Dinner with Sam", date(2024, 3, 4), "4"),
]


def test_empty_filters_return_everything():
    assert filter_events(EVENTS) == EVENTS


def test_search_matches_title_case_insensitively():
    assert [e.title for e in filter_events(EVENTS, "STANDUP")] == ["Team standup"]


def test_search_matches_description():
    assert [e.title for e in filter_events(EVENTS, "mat")] == ["Yoga"]


def test_category_selection():
    result = filter_events(EVENTS, category_ids=["3", "4"])
    assert [e.title for e in result] == ["Yoga", "Dinner with Sam"]


def test_search_and_category_combine():
    assert filter_events(EVENTS, "yoga", category_ids=["1"]) == []


def test_events_for_date():
    titles = [e.title for e in events_for_date(EVENTS, date(2024, 3, 4))]
    assert titles == ["Team standup", "Dinner with Sam"]


def test_month_grid_starts_on_sunday_and_has_six_weeks():
    grid = month_grid(date(2024, 3, 20))

    assert len(grid) == 42
    assert grid[0] == date(2024, 2, 25)
    assert grid[0].weekday() == 6  # Sunday
    assert date(2024, 3, 1) in grid
    assert grid[-1] == date(2024, 4, 6)


def test_month_grid_when_month_starts_on_sunday():
    grid = month_grid(date(2024, 9, 1))
    assert grid[0] == date(2024, 9, 1)


def test_group_by_date_sorts_days():
    groups = group_by_date(reversed(EVENTS))

    assert [day for day, _ in groups] == [date(2024, 3, 4), date(2024, 3, 5)]
    assert [e.title for e in groups[0][1]] == ["Dinner with Sam", "Team standup"]
