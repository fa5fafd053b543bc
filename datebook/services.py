"""Application services wiring records, storage and notifications.

Each service is constructed with its collaborators; nothing here is a
process-wide singleton. ``Services.create`` builds the usual set over one
blob store and one notifier.
"""

import logging
from collections.abc import Callable
from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from uuid import UUID

from datebook.grid import MONDAY, MonthGrid, MonthSpec, build_grid
from datebook.mutable import (
    EVENTS_KEY,
    NOTES_KEY,
    TIMERS_KEY,
    BlobStore,
    RecordCollection,
    WriteResult,
)
from datebook.notify import Notifier, note_requests, timer_requests
from datebook.records import CalendarEvent, Note, Timer, events_on, marker_dates

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class TimerService:
    def __init__(self, store: BlobStore, notifier: Notifier):
        self.timers: RecordCollection[Timer] = RecordCollection(store, TIMERS_KEY, Timer)
        self.notifier: Notifier = notifier

    def load(self) -> list[Timer]:
        return self.timers.load()

    def add(self, timer: Timer) -> WriteResult[Timer]:
        result = self.timers.upsert(timer)
        if result.success:
            for request in timer_requests(timer):
                self.notifier.add(request)
            logger.info("Added timer %s (%s)", timer.id, timer.title)
        return result

    def update(self, timer: Timer) -> WriteResult[Timer]:
        """Replace a stored timer and reschedule its alert.

        A failed write leaves the stored timer and its pending alert untouched.
        """
        result = self.timers.upsert(timer)
        if not result.success:
            return result
        self.notifier.remove([str(timer.id)])
        for request in timer_requests(timer):
            self.notifier.add(request)
        logger.info("Updated timer %s (%s)", timer.id, timer.title)
        return result

    def delete(self, timer_id: UUID) -> WriteResult[Timer]:
        self.notifier.remove([str(timer_id)])
        result = self.timers.remove(timer_id)
        if result.success:
            logger.info("Deleted timer %s", timer_id)
        return result


class CalendarService:
    def __init__(
        self,
        store: BlobStore,
        first_weekday: int = MONDAY,
        tz: tzinfo | None = None,
    ):
        self.events: RecordCollection[CalendarEvent] = RecordCollection(
            store, EVENTS_KEY, CalendarEvent
        )
        self.first_weekday: int = first_weekday
        self.tz: tzinfo | None = tz

    def add_or_update(self, event_id: UUID, title: str, date: datetime) -> WriteResult[CalendarEvent]:
        return self.events.upsert(CalendarEvent(id=event_id, title=title, date=date))

    def remove(self, event_id: UUID) -> WriteResult[CalendarEvent]:
        return self.events.remove(event_id)

    def load(self) -> list[CalendarEvent]:
        return self.events.load()

    def events_on(self, day: datetime) -> list[CalendarEvent]:
        return events_on(self.load(), day, self.tz)

    def grid(self, offset: int, now: datetime, *, pad_trailing: bool = False) -> MonthGrid:
        """Month grid ``offset`` months from ``now`` with event markers."""
        local_now = now.astimezone(self.tz) if self.tz is not None else now
        spec = MonthSpec.from_offset(local_now, offset, self.first_weekday)
        return build_grid(
            spec,
            marker_dates(self.load(), self.tz),
            pad_trailing=pad_trailing,
            tz=self.tz,
        )


class NoteService:
    def __init__(
        self,
        store: BlobStore,
        notifier: Notifier,
        calendar: CalendarService,
        clock: Clock = utc_now,
    ):
        self.notes: RecordCollection[Note] = RecordCollection(store, NOTES_KEY, Note)
        self.notifier: Notifier = notifier
        self.calendar: CalendarService = calendar
        self.clock: Clock = clock

    def load(self) -> list[Note]:
        return self.notes.load()

    def save(self, note: Note) -> WriteResult[Note]:
        """Insert or update a note and sync its calendar event and alerts.

        A failed calendar sync is logged and returned as a failed result; the
        note itself stays stored and its alerts are left as they were.
        """
        result = self.notes.upsert(note)
        if not result.success:
            return result

        synced: WriteResult[CalendarEvent] | None = None
        if note.add_to_calendar:
            synced = self.calendar.add_or_update(note.id, note.title, note.date)
        elif self.calendar.events.get(note.id) is not None:
            synced = self.calendar.remove(note.id)
        if synced is not None and not synced.success:
            logger.error("Calendar sync failed for note %s: %s", note.id, synced.error)
            return WriteResult(success=False, record=None, error=synced.error)

        self.notifier.remove_prefix(str(note.id))
        if note.needs_notifications:
            for request in note_requests(note, self.clock()):
                self.notifier.add(request)
        logger.info("Saved note %s (%s)", note.id, note.title)
        return result

    def delete(self, note_id: UUID) -> WriteResult[Note]:
        result = self.notes.remove(note_id)
        if result.success and result.record is not None and result.record.add_to_calendar:
            self.calendar.remove(note_id)
        self.notifier.remove_prefix(str(note_id))
        return result


@dataclass(frozen=True)
class Services:
    timers: TimerService
    notes: NoteService
    calendar: CalendarService

    @classmethod
    def create(
        cls,
        store: BlobStore,
        notifier: Notifier,
        *,
        first_weekday: int = MONDAY,
        tz: tzinfo | None = None,
        clock: Clock = utc_now,
    ) -> "Services":
        calendar = CalendarService(store, first_weekday=first_weekday, tz=tz)
        return cls(
            timers=TimerService(store, notifier),
            notes=NoteService(store, notifier, calendar, clock=clock),
            calendar=calendar,
        )
