"""Tests for the conflict-detection service."""

from datetime import date

from eventcal.domain.models import ConflictKind, Event
from eventcal.services.conflicts import detect_conflicts, events_overlap


def _make_event(
    start_time: str | None = None,
    end_time: str | None = None,
    day: date = date(2025, 1, 1),
    title: str = "Existing",
    **overrides,
) -> Event:
    return Event(
        title=title,
        start_date=day,
        end_date=day,
        start_time=start_time,
        end_time=end_time,
        category_id="1",
        **overrides,
    )


def test_no_overlap():
    """Events that don't overlap should not be returned as conflicts."""
    existing = [_make_event("08:00", "09:00")]
    candidate = _make_event("10:00", "11:00", title="New")
    assert detect_conflicts(candidate, existing) == []


def test_partial_overlap():
    """An event that partially overlaps is reported as an overlap."""
    existing = [_make_event("09:30", "10:30")]
    candidate = _make_event("09:00", "10:00", title="New")

    conflicts = detect_conflicts(candidate, existing)
    assert len(conflicts) == 1
    assert conflicts[0].kind == ConflictKind.OVERLAP
    assert conflicts[0].event1 == candidate
    assert conflicts[0].event2 == existing[0]


def test_exact_boundary_no_conflict():
    """When one event ends exactly as the other starts, there is no conflict."""
    existing = [_make_event("09:00", "10:00")]
    candidate = _make_event("10:00", "11:00", title="New")
    assert detect_conflicts(candidate, existing) == []


def test_same_time_kind():
    existing = [_make_event("14:00", "15:00")]
    candidate = _make_event("14:00", "15:00", title="New")

    conflicts = detect_conflicts(candidate, existing)
    assert [c.kind for c in conflicts] == [ConflictKind.SAME_TIME]


def test_different_days_never_conflict():
    existing = [_make_event("09:00", "10:00", day=date(2025, 1, 2))]
    candidate = _make_event("09:00", "10:00", title="New")
    assert detect_conflicts(candidate, existing) == []


def test_all_day_conflicts_with_any_timed_event():
    all_day = _make_event(is_all_day=True, title="Holiday")
    timed = _make_event("23:00", "23:30")

    assert events_overlap(all_day, timed)
    assert events_overlap(timed, all_day)

    conflicts = detect_conflicts(all_day, [timed])
    assert [c.kind for c in conflicts] == [ConflictKind.OVERLAP]


def test_all_day_without_times_on_either_side():
    first = _make_event(is_all_day=True, title="Holiday")
    second = _make_event(title="Untimed reminder")

    conflicts = detect_conflicts(first, [second])
    # Neither side has times, so the strings match as well
    assert [c.kind for c in conflicts] == [ConflictKind.SAME_TIME]


def test_missing_start_time_never_conflicts():
    untimed = _make_event(title="Someday")
    timed = _make_event("09:00", "17:00")

    assert detect_conflicts(untimed, [timed]) == []
    assert detect_conflicts(timed, [untimed]) == []


def test_missing_end_time_is_zero_width():
    point = _make_event("09:30", title="Call")

    assert events_overlap(point, _make_event("09:00", "10:00"))
    # A zero-width range at the boundary touches nothing
    assert not events_overlap(point, _make_event("09:30", "10:00"))
    assert not events_overlap(point, _make_event("09:30", title="Other call"))


def test_reports_one_conflict_per_overlapping_event():
    existing = [
        _make_event("08:00", "09:30", title="A"),
        _make_event("09:15", "09:45", title="B"),
        _make_event("12:00", "13:00", title="C"),
    ]
    candidate = _make_event("09:00", "10:00", title="New")

    conflicts = detect_conflicts(candidate, existing)
    assert [c.event2.title for c in conflicts] == ["A", "B"]


def test_detector_does_not_skip_the_candidate_itself():
    candidate = _make_event("09:00", "10:00", title="New")
    conflicts = detect_conflicts(candidate, [candidate])
    assert [c.kind for c in conflicts] == [ConflictKind.SAME_TIME]


def test_detect_conflicts_is_idempotent():
    existing = [_make_event("09:30", "10:30"), _make_event(is_all_day=True)]
    candidate = _make_event("09:00", "10:00", title="New")
    assert detect_conflicts(candidate, existing) == detect_conflicts(candidate, existing)
