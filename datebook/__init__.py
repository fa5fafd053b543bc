from .calculator import InvalidTimeInput, TimeInput, calculate, format_hms, total_seconds
from .delta import Breakdown, Direction, DisplayMode, breakdown, format_delta
from .grid import (
    MONDAY,
    SUNDAY,
    MonthGrid,
    MonthSpec,
    build_grid,
    is_today,
    month_title,
    months_between,
    same_day,
    weekday_labels,
)
from .records import CalendarEvent, Note, Timer

__all__ = [
    "Direction",
    "DisplayMode",
    "Breakdown",
    "breakdown",
    "format_delta",
    "MonthSpec",
    "MonthGrid",
    "build_grid",
    "same_day",
    "is_today",
    "months_between",
    "month_title",
    "weekday_labels",
    "MONDAY",
    "SUNDAY",
    "TimeInput",
    "InvalidTimeInput",
    "calculate",
    "total_seconds",
    "format_hms",
    "Timer",
    "Note",
    "CalendarEvent",
]
