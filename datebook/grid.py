"""Month grid generation for calendar views.

A grid is the sequence of cells a seven-column month view renders: blank
padding before day 1 so that it lands under the right weekday, then one cell
per calendar day. Weekday indices use 0=Sunday .. 6=Saturday.
"""

import calendar
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from datetime import date, datetime, tzinfo
from typing import Literal, TypeAlias

from dateutil.relativedelta import relativedelta

Day: TypeAlias = Literal[
    "sunday", "monday", "tuesday", "wednesday", "thursday", "friday", "saturday"
]

# Mapping from day names to weekday indices (Sunday-based)
_DAY_MAP: dict[Day, int] = {
    "sunday": 0,
    "monday": 1,
    "tuesday": 2,
    "wednesday": 3,
    "thursday": 4,
    "friday": 5,
    "saturday": 6,
}

SUNDAY = 0
MONDAY = 1

Cell: TypeAlias = date | None


def resolve_weekday(value: int | str) -> int:
    if isinstance(value, str):
        key = value.lower()
        if key not in _DAY_MAP:
            valid = ", ".join(_DAY_MAP.keys())
            raise ValueError(f"Invalid day '{value}'. Valid days: {valid}")
        return _DAY_MAP[key]
    if not 0 <= value <= 6:
        raise ValueError(
            f"first_weekday must be 0-6 (0=Sunday .. 6=Saturday), got {value}"
        )
    return value


def weekday_index(day: date) -> int:
    """Sunday-based weekday index of ``day``."""
    return day.isoweekday() % 7


def _as_day(value: date | datetime, tz: tzinfo | None = None) -> date:
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(tz)
        return value.date()
    return value


@dataclass(frozen=True, kw_only=True)
class MonthSpec:
    year: int
    month: int
    first_weekday: int = MONDAY

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValueError(f"month must be 1-12, got {self.month}")
        object.__setattr__(self, "first_weekday", resolve_weekday(self.first_weekday))

    @classmethod
    def from_offset(
        cls,
        reference: date | datetime,
        offset: int = 0,
        first_weekday: int | Day = MONDAY,
    ) -> "MonthSpec":
        """Month ``offset`` months away from the month containing ``reference``.

        Offset 0 is the reference month, negative offsets go back in time.

        Raises:
            ValueError: If the resulting year falls outside 1..9999
        """
        year, index = divmod(reference.year * 12 + reference.month - 1 + offset, 12)
        if not 1 <= year <= 9999:
            raise ValueError(
                f"Month offset {offset} from {reference.isoformat()} "
                f"leaves the supported calendar range (year {year})"
            )
        return cls(year=year, month=index + 1, first_weekday=first_weekday)

    @property
    def first_day(self) -> date:
        return date(self.year, self.month, 1)

    @property
    def days_in_month(self) -> int:
        return calendar.monthrange(self.year, self.month)[1]

    @property
    def leading_blanks(self) -> int:
        return (weekday_index(self.first_day) - self.first_weekday + 7) % 7


@dataclass(frozen=True)
class MonthGrid:
    """Cells of a month view plus the marker days shown on it."""

    spec: MonthSpec
    cells: tuple[Cell, ...]
    markers: frozenset[date] = field(default_factory=frozenset)
    tz: tzinfo | None = None

    def has_marker(self, value: date | datetime) -> bool:
        """True if ``value`` falls on a marked calendar day (time ignored)."""
        return _as_day(value, self.tz) in self.markers

    @property
    def days(self) -> list[date]:
        return [cell for cell in self.cells if cell is not None]

    def weeks(self) -> Iterator[tuple[Cell, ...]]:
        """Yield rows of seven cells; the last row may be shorter."""
        for i in range(0, len(self.cells), 7):
            yield self.cells[i : i + 7]


def build_grid(
    spec: MonthSpec,
    markers: Iterable[date | datetime] = (),
    *,
    pad_trailing: bool = False,
    tz: tzinfo | None = None,
) -> MonthGrid:
    """Build the cell layout for one month.

    Args:
        spec: Month and first-weekday convention
        markers: Dates or datetimes that should carry an indicator dot
        pad_trailing: Pad the final week with blanks so the cell count is a
            multiple of seven. Off by default, leaving a short last row.
        tz: Zone used to reduce aware marker datetimes to calendar days

    Example:
        >>> grid = build_grid(MonthSpec(year=2024, month=2))
        >>> grid.cells[:4]
        (None, None, None, datetime.date(2024, 2, 1))
    """
    first = spec.first_day
    cells: list[Cell] = [None] * spec.leading_blanks
    cells.extend(first.replace(day=n) for n in range(1, spec.days_in_month + 1))
    if pad_trailing:
        cells.extend([None] * (-len(cells) % 7))

    return MonthGrid(
        spec=spec,
        cells=tuple(cells),
        markers=frozenset(_as_day(m, tz) for m in markers),
        tz=tz,
    )


def same_day(
    a: date | datetime, b: date | datetime, tz: tzinfo | None = None
) -> bool:
    """Calendar-day equality, ignoring time of day."""
    return _as_day(a, tz) == _as_day(b, tz)


def is_today(value: date | datetime, now: datetime) -> bool:
    return same_day(value, now, now.tzinfo)


def months_between(now: date | datetime, selected: date | datetime) -> int:
    """Whole-month offset that navigates from ``now`` to ``selected``.

    Partial months are truncated toward zero, so picking a date three weeks
    ahead stays on offset 0 unless it crosses a whole month.
    """
    rd = relativedelta(selected, now)
    return rd.years * 12 + rd.months


def month_title(spec: MonthSpec) -> str:
    return f"{calendar.month_name[spec.month]} {spec.year}"


def weekday_labels(first_weekday: int | Day = MONDAY) -> list[str]:
    """Three-letter column headers starting at ``first_weekday``."""
    start = resolve_weekday(first_weekday)
    # calendar.day_abbr is Monday-based
    names = [calendar.day_abbr[(start + i - 1) % 7] for i in range(7)]
    return [name.upper() for name in names]
