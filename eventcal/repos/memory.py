"""In-memory repositories for events, categories and the activity timeline.

Nothing here survives a restart; callers that need durable storage keep their
own copy of the data and replay it through the API.
"""

from __future__ import annotations

from eventcal.domain.models import Category, Event, TimelineEntry


class EventRepository:
    """Dict-backed store for series roots and one-off Events, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Event] = {}

    def add(self, event: Event) -> None:
        self._store[event.id] = event

    def get(self, event_id: str) -> Event | None:
        return self._store.get(event_id)

    def list_all(self) -> list[Event]:
        return list(self._store.values())

    def replace(self, event: Event) -> None:
        """Swap in a new version of an already stored event."""
        if event.id not in self._store:
            raise KeyError(event.id)
        self._store[event.id] = event

    def delete(self, event_id: str) -> Event | None:
        return self._store.pop(event_id, None)


class CategoryRepository:
    """Dict-backed store for Category instances, keyed by id."""

    def __init__(self) -> None:
        self._store: dict[str, Category] = {}

    def add(self, category: Category) -> None:
        self._store[category.id] = category

    def get(self, category_id: str) -> Category | None:
        return self._store.get(category_id)

    def list_all(self) -> list[Category]:
        return list(self._store.values())


class TimelineRepository:
    """List-backed store for TimelineEntry instances."""

    def __init__(self) -> None:
        self._entries: list[TimelineEntry] = []

    def add(self, entry: TimelineEntry) -> None:
        self._entries.append(entry)

    def list_for_event(self, event_id: str) -> list[TimelineEntry]:
        return sorted(
            [e for e in self._entries if e.event_id == event_id],
            key=lambda e: e.timestamp,
        )


# ---------------------------------------------------------------------------
# Seed data – the default categories offered to a new calendar
# ---------------------------------------------------------------------------

DEFAULT_CATEGORIES = [
    Category(id="1", name="Work", color="#3B82F6"),
    Category(id="2", name="Personal", color="#10B981"),
    Category(id="3", name="Health", color="#F59E0B"),
    Category(id="4", name="Social", color="#EF4444"),
]


def seed_categories(repo: CategoryRepository) -> None:
    for category in DEFAULT_CATEGORIES:
        repo.add(category.model_copy())


def create_category_repository(seed: bool = True) -> CategoryRepository:
    """Return a CategoryRepository, optionally pre-loaded with the defaults."""
    repo = CategoryRepository()
    if seed:
        seed_categories(repo)
    return repo
