"""Utility constants and helpers for datebook.

Time unit constants represent durations in seconds.
The year and month figures are averages used by the fractional display
modes; they are not calendar-exact.
"""

from datetime import datetime

# Time unit constants (all values in seconds)
SECOND = 1
MINUTE = 60
HOUR = 3600
DAY = 86400
MONTH = 30.44 * DAY
YEAR = 365.25 * DAY


def require_aware(value: datetime, name: str) -> datetime:
    """Return ``value`` unchanged, or raise if it carries no timezone."""
    if value.tzinfo is None or value.utcoffset() is None:
        raise TypeError(
            f"{name} must be a timezone-aware datetime.\n"
            f"Got naive datetime: {value!r}\n"
            f"Hint: Add timezone info:\n"
            f"  from zoneinfo import ZoneInfo\n"
            f"  dt = datetime(..., tzinfo=ZoneInfo('UTC'))  "
            f"# or 'Europe/Berlin', etc."
        )
    return value
