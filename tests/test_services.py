"""Tests for the timer, note and calendar services."""

from dataclasses import replace
from datetime import date, datetime, timedelta, timezone
from uuid import uuid4

import pytest

from datebook import Note, Timer
from datebook.mutable.memory import MemoryBlobStore
from datebook.notify import MemoryNotifier
from datebook.services import Services

UTC = timezone.utc
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


@pytest.fixture
def notifier():
    return MemoryNotifier()


@pytest.fixture
def services(notifier):
    return Services.create(MemoryBlobStore(), notifier, clock=lambda: NOW)


def _pending(notifier):
    return [r.identifier for r in notifier.pending()]


def test_add_timer_schedules_alert(services, notifier):
    """Test that adding a countdown stores it and schedules its alert."""
    timer = Timer(title="Launch", date=NOW + timedelta(days=1))
    result = services.timers.add(timer)

    assert result.success
    assert services.timers.load() == [timer]
    assert _pending(notifier) == [str(timer.id)]


def test_update_timer_reschedules(services, notifier):
    """Test that editing a timer replaces its alert."""
    timer = Timer(title="Launch", date=NOW + timedelta(days=1))
    services.timers.add(timer)

    moved = replace(timer, date=NOW + timedelta(days=3))
    services.timers.update(moved)

    assert services.timers.load() == [moved]
    [request] = notifier.pending()
    assert request.fire_at == moved.date


def test_switching_timer_to_from_date_clears_alert(services, notifier):
    """Test that a timer turned into a from-date timer loses its alert."""
    timer = Timer(title="Launch", date=NOW + timedelta(days=1))
    services.timers.add(timer)
    services.timers.update(replace(timer, is_countdown=False))

    assert notifier.pending() == []


def test_delete_timer(services, notifier):
    """Test that deleting a timer removes it and its alert."""
    timer = Timer(title="Launch", date=NOW + timedelta(days=1))
    services.timers.add(timer)

    result = services.timers.delete(timer.id)

    assert result.success
    assert result.record == timer
    assert services.timers.load() == []
    assert notifier.pending() == []


def test_delete_unknown_timer(services):
    """Test that deleting an unknown id reports failure."""
    result = services.timers.delete(uuid4())

    assert not result.success
    assert isinstance(result.error, KeyError)


def test_calendar_note_creates_event_and_alerts(services, notifier):
    """Test that saving a calendar note syncs its event and reminders."""
    note = Note(
        title="Dentist",
        date=NOW + timedelta(days=2),
        add_to_calendar=True,
        repeat_dates=(NOW + timedelta(days=1),),
    )
    services.notes.save(note)

    [event] = services.calendar.load()
    assert event.id == note.id
    assert event.title == "Dentist"
    assert sorted(_pending(notifier)) == sorted(
        [f"{note.id}_main", f"{note.id}_repeat_0"]
    )


def test_unpinning_note_removes_event(services, notifier):
    """Test that clearing the calendar flag removes the event."""
    note = Note(title="Dentist", date=NOW + timedelta(days=2), add_to_calendar=True)
    services.notes.save(note)

    services.notes.save(replace(note, add_to_calendar=False))

    assert services.calendar.load() == []
    assert notifier.pending() == []
    assert services.notes.load()[0].add_to_calendar is False


def test_delete_note_clears_everything(services, notifier):
    """Test that deleting a note removes the note, its event and reminders."""
    note = Note(
        title="Dentist",
        date=NOW + timedelta(days=2),
        add_to_calendar=True,
        repeat_dates=(NOW + timedelta(days=1),),
    )
    services.notes.save(note)

    services.notes.delete(note.id)

    assert services.notes.load() == []
    assert services.calendar.load() == []
    assert notifier.pending() == []


def test_calendar_grid_marks_event_days(services):
    """Test that the calendar grid carries markers for stored events."""
    note = Note(
        title="Trip",
        date=datetime(2025, 7, 14, 9, 0, tzinfo=UTC),
        add_to_calendar=True,
    )
    services.notes.save(note)

    grid = services.calendar.grid(1, NOW)

    assert (grid.spec.year, grid.spec.month) == (2025, 7)
    assert grid.has_marker(date(2025, 7, 14))
    assert not grid.has_marker(date(2025, 7, 15))
    assert [e.title for e in services.calendar.events_on(datetime(2025, 7, 14, tzinfo=UTC))] == ["Trip"]


class FlakyBlobStore(MemoryBlobStore):
    """Memory store whose writes fail for the keys listed in ``failing``."""

    def __init__(self):
        super().__init__()
        self.failing: set[str] = set()

    def set(self, key, value):
        if key in self.failing:
            raise OSError(f"disk full writing {key}")
        super().set(key, value)


def test_failed_timer_update_keeps_alert(notifier):
    """Test that a failed write leaves the stored timer and its alert alone."""
    store = FlakyBlobStore()
    services = Services.create(store, notifier, clock=lambda: NOW)
    timer = Timer(title="Launch", date=NOW + timedelta(days=1))
    services.timers.add(timer)

    store.failing.add("SavedTimers")
    result = services.timers.update(replace(timer, date=NOW + timedelta(days=3)))

    assert not result.success
    assert isinstance(result.error, OSError)
    assert services.timers.load() == [timer]
    [request] = notifier.pending()
    assert request.identifier == str(timer.id)
    assert request.fire_at == timer.date


def test_failed_calendar_sync_is_reported(notifier):
    """Test that a note save reports a calendar event write failure."""
    store = FlakyBlobStore()
    services = Services.create(store, notifier, clock=lambda: NOW)
    store.failing.add("CalendarEvents")
    note = Note(title="Dentist", date=NOW + timedelta(days=2), add_to_calendar=True)

    result = services.notes.save(note)

    assert not result.success
    assert isinstance(result.error, OSError)
    assert services.calendar.load() == []
