"""Domain event handlers — wired up at application startup."""

from __future__ import annotations

import logging

from eventcal.domain.bus import EventBus
from eventcal.domain.events import (
    ConflictDetected,
    EventCreated,
    EventDeleted,
    EventMoved,
    EventUpdated,
)
from eventcal.domain.models import TimelineEntry, TimelineEntryType
from eventcal.repos.memory import EventRepository, TimelineRepository

logger = logging.getLogger(__name__)


class HandlerRegistry:
    """Wires domain-event handlers to the bus with access to the repositories."""

    def __init__(
        self,
        bus: EventBus,
        event_repo: EventRepository,
        timeline_repo: TimelineRepository,
    ) -> None:
        self.bus = bus
        self.event_repo = event_repo
        self.timeline_repo = timeline_repo
        self._register()

    def _register(self) -> None:
        self.bus.subscribe(EventCreated, self.on_event_created)
        self.bus.subscribe(EventUpdated, self.on_event_updated)
        self.bus.subscribe(EventMoved, self.on_event_moved)
        self.bus.subscribe(EventDeleted, self.on_event_deleted)
        self.bus.subscribe(ConflictDetected, self.on_conflict_detected)

    # ------------------------------------------------------------------
    # Handlers
    # ------------------------------------------------------------------

    def on_event_created(self, event: EventCreated) -> None:
        stored = self.event_repo.get(event.event_id)
        if stored is None:
            return

        payload = {"title": stored.title, "start_date": stored.start_date.isoformat()}
        if stored.recurrence is not None:
            payload["recurrence"] = stored.recurrence.type.value
        self.timeline_repo.add(
            TimelineEntry(
                event_id=event.event_id,
                type=TimelineEntryType.CREATED,
                payload=payload,
            )
        )
        logger.info("Created event %s (%s)", stored.id, stored.title)

    def on_event_updated(self, event: EventUpdated) -> None:
        stored = self.event_repo.get(event.event_id)
        if stored is None:
            return

        self.timeline_repo.add(
            TimelineEntry(event_id=event.event_id, type=TimelineEntryType.UPDATED)
        )
        logger.info("Updated event %s", stored.id)

    def on_event_moved(self, event: EventMoved) -> None:
        if self.event_repo.get(event.event_id) is None:
            return

        self.timeline_repo.add(
            TimelineEntry(
                event_id=event.event_id,
                type=TimelineEntryType.MOVED,
                payload={
                    "from_date": event.from_date.isoformat(),
                    "to_date": event.to_date.isoformat(),
                    "start_time": event.start_time,
                },
            )
        )
        logger.info(
            "Moved event %s from %s to %s", event.event_id, event.from_date, event.to_date
        )

    def on_event_deleted(self, event: EventDeleted) -> None:
        # The event is already gone from the repo; the timeline keeps its trace.
        self.timeline_repo.add(
            TimelineEntry(
                event_id=event.event_id,
                type=TimelineEntryType.DELETED,
                payload={"title": event.title},
            )
        )
        logger.info("Deleted event %s (%s)", event.event_id, event.title)

    def on_conflict_detected(self, event: ConflictDetected) -> None:
        if self.event_repo.get(event.event_id) is None:
            return

        self.timeline_repo.add(
            TimelineEntry(
                event_id=event.event_id,
                type=TimelineEntryType.CONFLICT_DETECTED,
                payload={"conflicting_event_ids": event.conflicting_event_ids},
            )
        )
        logger.warning(
            "Event %s committed with %d conflict(s)",
            event.event_id,
            len(event.conflicting_event_ids),
        )
