"""Tests for notification planning and the in-memory notifier."""

from datetime import datetime, timedelta, timezone

from datebook import Note, Timer
from datebook.notify import (
    MemoryNotifier,
    NotificationRequest,
    note_requests,
    timer_requests,
)

UTC = timezone.utc
NOW = datetime(2025, 6, 1, 12, 0, tzinfo=UTC)


def test_countdown_gets_finished_alert():
    """Test the single alert planned for a countdown."""
    timer = Timer(title="Launch", date=NOW + timedelta(hours=1))
    [request] = timer_requests(timer)

    assert request.identifier == str(timer.id)
    assert request.title == "Timer Finished"
    assert request.body == "Launch has arrived."
    assert request.fire_at == timer.date


def test_from_date_timer_gets_no_alert():
    """Test that from-date timers are never scheduled."""
    timer = Timer(title="Since", date=NOW, is_countdown=False)
    assert timer_requests(timer) == []


def test_note_requests_skip_past_dates():
    """Test that only future note dates are scheduled."""
    note = Note(
        title="Meds",
        date=NOW + timedelta(days=1),
        add_to_calendar=True,
        repeat_dates=(NOW - timedelta(days=1), NOW + timedelta(days=2)),
    )
    requests = note_requests(note, NOW)

    assert [r.identifier for r in requests] == [f"{note.id}_main", f"{note.id}_repeat_1"]
    assert requests[0].body == "Calendar reminder"
    assert requests[1].body == "Reminder repeat"


def test_note_main_date_needs_calendar_flag():
    """Test that the main date is only scheduled for calendar notes."""
    note = Note(title="Idea", date=NOW + timedelta(days=1))
    assert note_requests(note, NOW) == []


def test_remove_prefix():
    """Test clearing every request belonging to one record."""
    notifier = MemoryNotifier()
    for identifier in ("abc_main", "abc_repeat_0", "xyz_main"):
        notifier.add(
            NotificationRequest(identifier=identifier, title="t", body="b", fire_at=NOW)
        )

    notifier.remove_prefix("abc")

    assert [r.identifier for r in notifier.pending()] == ["xyz_main"]


def test_adding_same_identifier_replaces():
    """Test that rescheduling an identifier keeps one pending request."""
    notifier = MemoryNotifier()
    first = NotificationRequest(identifier="t", title="t", body="b", fire_at=NOW)
    second = NotificationRequest(
        identifier="t", title="t", body="b", fire_at=NOW + timedelta(hours=1)
    )
    notifier.add(first)
    notifier.add(second)

    assert notifier.pending() == [second]
