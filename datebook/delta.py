"""Relative-time formatting for countdown and from-date timers.

The auto mode breaks a span into calendar components with python-dateutil's
``relativedelta``, so month and year lengths follow the real calendar. The
fractional modes divide by the average lengths in :mod:`datebook.util`.
"""

from dataclasses import dataclass
from datetime import datetime, timezone, tzinfo
from enum import Enum

from dateutil.relativedelta import relativedelta
from typing_extensions import assert_never

from datebook.util import DAY, HOUR, MINUTE, MONTH, SECOND, YEAR, require_aware

TIMES_UP = "Time's up"


class Direction(Enum):
    """Which way a timer counts relative to its target instant."""

    COUNTING_DOWN_TO = "countingDownTo"
    COUNTING_UP_FROM = "countingUpFrom"


class DisplayMode(Enum):
    AUTO = "default"
    YEARS = "years"
    MONTHS = "months"
    DAYS = "days"
    HOURS = "hours"
    MINUTES = "minutes"
    SECONDS = "seconds"

    @property
    def label(self) -> str:
        return "Default" if self is DisplayMode.AUTO else self.value.capitalize()


@dataclass(frozen=True, kw_only=True)
class Breakdown:
    years: int = 0
    months: int = 0
    days: int = 0
    hours: int = 0
    minutes: int = 0
    seconds: int = 0

    def __str__(self) -> str:
        """Compact form, e.g. ``1y 2mo 3d``; empty when every part is zero."""
        parts = (
            (self.years, "y"),
            (self.months, "mo"),
            (self.days, "d"),
            (self.hours, "h"),
            (self.minutes, "m"),
            (self.seconds, "s"),
        )
        return " ".join(f"{value}{unit}" for value, unit in parts if value > 0)


def breakdown(start: datetime, end: datetime, tz: tzinfo | None = None) -> Breakdown:
    """Decompose ``end - start`` into calendar components.

    Args:
        start: Earlier instant (timezone-aware)
        end: Later instant (timezone-aware), must not precede ``start``
        tz: Zone whose calendar is used for month and day boundaries.
            Defaults to the zone of ``start``.

    Returns:
        Breakdown with every component >= 0

    Raises:
        TypeError: If either instant is naive
        ValueError: If ``end`` is earlier than ``start``
    """
    require_aware(start, "start")
    require_aware(end, "end")
    if end.astimezone(timezone.utc) < start.astimezone(timezone.utc):
        raise ValueError(
            f"breakdown() needs end >= start.\n"
            f"Got start={start.isoformat()} end={end.isoformat()}\n"
            f"Hint: swap the arguments or use format_delta() for signed spans"
        )

    zone = tz or start.tzinfo
    local_start = start.astimezone(zone).replace(tzinfo=None)
    local_end = end.astimezone(zone).replace(tzinfo=None)
    if local_end < local_start:
        # Inside a fall-back overlap the later instant can read earlier on the
        # wall clock; decompose in UTC there
        local_start = start.astimezone(timezone.utc).replace(tzinfo=None)
        local_end = end.astimezone(timezone.utc).replace(tzinfo=None)
    rd = relativedelta(local_end, local_start)
    return Breakdown(
        years=rd.years,
        months=rd.months,
        days=rd.days,
        hours=rd.hours,
        minutes=rd.minutes,
        seconds=rd.seconds,
    )


def format_delta(
    reference: datetime,
    target: datetime,
    direction: Direction = Direction.COUNTING_DOWN_TO,
    mode: DisplayMode = DisplayMode.AUTO,
    tz: tzinfo | None = None,
) -> str:
    """Format the span between ``reference`` (now) and a timer's ``target``.

    Countdowns measure from now to the target, from-date timers from the
    target to now. A span that has gone negative renders as ``"Time's up"``
    whatever the mode.

    Example:
        >>> from datetime import datetime, timezone
        >>> now = datetime(2025, 1, 1, tzinfo=timezone.utc)
        >>> format_delta(now, datetime(2025, 1, 3, 4, tzinfo=timezone.utc))
        '2d 4h'
    """
    require_aware(reference, "reference")
    require_aware(target, "target")

    if direction is Direction.COUNTING_DOWN_TO:
        start, end = reference, target
    else:
        start, end = target, reference

    # Same-tzinfo datetimes compare and subtract by wall clock; use UTC
    utc_start = start.astimezone(timezone.utc)
    utc_end = end.astimezone(timezone.utc)
    if utc_end < utc_start:
        return TIMES_UP

    span = utc_end - utc_start
    # Whole seconds, sub-second remainder dropped
    whole = span.days * DAY + span.seconds

    match mode:
        case DisplayMode.YEARS:
            return f"{span.total_seconds() / YEAR:.2f} years"
        case DisplayMode.MONTHS:
            return f"{span.total_seconds() / MONTH:.2f} months"
        case DisplayMode.DAYS:
            return f"{whole // DAY} days"
        case DisplayMode.HOURS:
            return f"{whole // HOUR} hours"
        case DisplayMode.MINUTES:
            return f"{whole // MINUTE} minutes"
        case DisplayMode.SECONDS:
            return f"{whole // SECOND} seconds"
        case DisplayMode.AUTO:
            return str(breakdown(start, end, tz=tz or target.tzinfo))
        case _:
            assert_never(mode)
