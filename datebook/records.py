"""Timer, note and calendar event records.

Records are immutable values; edits produce new instances via
``dataclasses.replace``. Each converts to and from a JSON-compatible dict
for the storage layer.
"""

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Any, Self
from uuid import UUID, uuid4

from dateutil.parser import isoparse

from datebook.delta import Direction, DisplayMode, format_delta
from datebook.grid import same_day
from datebook.util import require_aware


def _clean_title(record: object, title: str) -> None:
    stripped = title.strip()
    if not stripped:
        raise ValueError(
            f"{type(record).__name__} title must not be empty.\n"
            f"Got: {title!r}"
        )
    object.__setattr__(record, "title", stripped)


def _load_instant(value: str) -> datetime:
    return require_aware(isoparse(value), "stored instant")


@dataclass(frozen=True, kw_only=True)
class Timer:
    title: str
    date: datetime
    is_countdown: bool = True
    display_mode: DisplayMode = DisplayMode.AUTO
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        _clean_title(self, self.title)
        require_aware(self.date, "Timer.date")

    @property
    def direction(self) -> Direction:
        if self.is_countdown:
            return Direction.COUNTING_DOWN_TO
        return Direction.COUNTING_UP_FROM

    def display(self, now: datetime, tz: tzinfo | None = None) -> str:
        """Formatted time left (countdown) or time elapsed (from-date)."""
        return format_delta(now, self.date, self.direction, self.display_mode, tz=tz)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "date": self.date.isoformat(),
            "isCountdown": self.is_countdown,
            "displayMode": self.display_mode.value,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=UUID(data["id"]),
            title=data["title"],
            date=_load_instant(data["date"]),
            is_countdown=bool(data["isCountdown"]),
            display_mode=DisplayMode(data.get("displayMode", DisplayMode.AUTO.value)),
        )


@dataclass(frozen=True, kw_only=True)
class Note:
    """Free-form note, optionally pinned to the calendar and repeated.

    Attributes:
        date: Main date, meaningful only when ``add_to_calendar`` is set
        repeat_dates: Extra reminder instants, independent of the calendar flag
    """

    title: str
    content: str = ""
    date: datetime
    add_to_calendar: bool = False
    repeat_dates: tuple[datetime, ...] = ()
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        _clean_title(self, self.title)
        require_aware(self.date, "Note.date")
        for repeat in self.repeat_dates:
            require_aware(repeat, "Note.repeat_dates")
        object.__setattr__(self, "repeat_dates", tuple(self.repeat_dates))

    @property
    def needs_notifications(self) -> bool:
        return self.add_to_calendar or bool(self.repeat_dates)

    def next_repeat(self, now: datetime) -> datetime | None:
        """Earliest repeat at or after ``now``, else the earliest overall."""
        if not self.repeat_dates:
            return None
        upcoming = [r for r in self.repeat_dates if r >= now]
        return min(upcoming or self.repeat_dates)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "title": self.title,
            "content": self.content,
            "date": self.date.isoformat(),
            "addToCalendar": self.add_to_calendar,
            "repeatDates": [r.isoformat() for r in self.repeat_dates] or None,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=UUID(data["id"]),
            title=data["title"],
            content=data.get("content", ""),
            date=_load_instant(data["date"]),
            add_to_calendar=bool(data.get("addToCalendar", False)),
            repeat_dates=tuple(_load_instant(r) for r in data.get("repeatDates") or ()),
        )


@dataclass(frozen=True, kw_only=True)
class CalendarEvent:
    title: str
    date: datetime
    id: UUID = field(default_factory=uuid4)

    def __post_init__(self) -> None:
        _clean_title(self, self.title)
        require_aware(self.date, "CalendarEvent.date")

    def to_dict(self) -> dict[str, Any]:
        return {"id": str(self.id), "title": self.title, "date": self.date.isoformat()}

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            id=UUID(data["id"]),
            title=data["title"],
            date=_load_instant(data["date"]),
        )


def split_timers(timers: Iterable[Timer]) -> tuple[list[Timer], list[Timer]]:
    """Separate countdowns from from-date timers, keeping order."""
    countdowns: list[Timer] = []
    from_dates: list[Timer] = []
    for timer in timers:
        (countdowns if timer.is_countdown else from_dates).append(timer)
    return countdowns, from_dates


def events_on(
    events: Iterable[CalendarEvent], day: date | datetime, tz: tzinfo | None = None
) -> list[CalendarEvent]:
    return [event for event in events if same_day(event.date, day, tz)]


def marker_dates(
    events: Iterable[CalendarEvent], tz: tzinfo | None = None
) -> Iterator[date]:
    """Calendar days that carry at least one event."""
    for event in events:
        when = event.date.astimezone(tz) if tz is not None else event.date
        yield when.date()
