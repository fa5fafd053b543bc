"""Duration calculator: add and subtract hh:mm:ss entries.

Entries hold the raw text typed into each field. Blank fields count as zero,
anything else must be a whole number between 0 and 9999.
"""

from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from datebook.util import HOUR, MINUTE

PLACEHOLDER = "--:--:--"
FIELD_MAX = 9999

Operation = Literal["+", "-", "−"]


class InvalidTimeInput(ValueError):
    """Raised when calculator input cannot be interpreted."""


@dataclass(frozen=True, kw_only=True)
class TimeInput:
    hours: str = ""
    minutes: str = ""
    seconds: str = ""
    operation: Operation = "+"


def parse_field(text: str) -> int:
    """Parse one field; empty means 0, malformed text is rejected."""
    stripped = text.strip()
    if not stripped:
        return 0
    if not stripped.isascii() or not stripped.isdigit():
        raise InvalidTimeInput(
            f"value must be an integer between 0 and {FIELD_MAX}, got {text!r}"
        )
    value = int(stripped)
    if value > FIELD_MAX:
        raise InvalidTimeInput(
            f"value must be an integer between 0 and {FIELD_MAX}, got {value}"
        )
    return value


def to_seconds(entry: TimeInput) -> int:
    return (
        parse_field(entry.hours) * HOUR
        + parse_field(entry.minutes) * MINUTE
        + parse_field(entry.seconds)
    )


def total_seconds(entries: Sequence[TimeInput]) -> int:
    """Fold entries into a total.

    The first entry seeds the total and its operation is ignored. A
    subtraction that would go below zero leaves the total at zero.

    Raises:
        InvalidTimeInput: If there are no entries, a field is malformed, or
            an operation is not ``+``/``-``
    """
    if not entries:
        raise InvalidTimeInput("add at least one time")

    total = to_seconds(entries[0])
    for entry in entries[1:]:
        seconds = to_seconds(entry)
        match entry.operation:
            case "+":
                total += seconds
            case "-" | "−":
                total = max(total - seconds, 0)
            case other:
                raise InvalidTimeInput(
                    f"Unknown operation {other!r}. Valid operations: +, -"
                )
    return total


def format_hms(seconds: int) -> str:
    hours, rest = divmod(seconds, HOUR)
    minutes, secs = divmod(rest, MINUTE)
    return f"{hours:02d}:{minutes:02d}:{secs:02d}"


def calculate(entries: Sequence[TimeInput]) -> str:
    """Total the entries and format the result as ``HH:MM:SS``.

    Example:
        >>> calculate([TimeInput(hours="1"), TimeInput(minutes="30", operation="-")])
        '00:30:00'
    """
    return format_hms(total_seconds(entries))
