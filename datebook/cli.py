"""Command line interface: ``python -m datebook``."""

import argparse
import logging
import sys
from collections.abc import Sequence
from datetime import datetime

from dateutil.parser import ParserError, parse

from datebook.calculator import InvalidTimeInput, TimeInput, calculate
from datebook.config import Settings, load_settings
from datebook.delta import DisplayMode
from datebook.grid import is_today, month_title, weekday_labels
from datebook.mutable.file import FileBlobStore
from datebook.notify import MemoryNotifier
from datebook.records import Timer, split_timers
from datebook.services import Services

logger = logging.getLogger(__name__)

EXIT_INVALID = 2


def _services(settings: Settings) -> Services:
    return Services.create(
        FileBlobStore(settings.data_dir),
        MemoryNotifier(),
        first_weekday=settings.first_weekday,
        tz=settings.zone,
    )


def _parse_when(text: str, settings: Settings) -> datetime:
    when = parse(text)
    if when.tzinfo is None:
        when = when.replace(tzinfo=settings.zone)
    return when


def parse_term(term: str) -> TimeInput:
    """Turn ``[+|-]H:M:S`` (or ``M:S``, ``S``) into a calculator entry."""
    operation = "+"
    if term[:1] in ("+", "-", "−"):
        operation, term = term[0], term[1:]
    parts = term.split(":")
    if len(parts) > 3:
        raise InvalidTimeInput(f"Expected H:M:S, got {term!r}")
    hours, minutes, seconds = [""] * (3 - len(parts)) + parts
    return TimeInput(hours=hours, minutes=minutes, seconds=seconds, operation=operation)


def cmd_timers(args: argparse.Namespace, settings: Settings) -> int:
    now = datetime.now(settings.zone)
    countdowns, from_dates = split_timers(_services(settings).timers.load())
    for heading, timers in (("Countdowns", countdowns), ("From Dates", from_dates)):
        if not timers:
            continue
        print(heading)
        for timer in timers:
            print(f"  {timer.title}: {timer.display(now, tz=settings.zone)}")
    if not countdowns and not from_dates:
        print("No timers yet")
    return 0


def cmd_add_timer(args: argparse.Namespace, settings: Settings) -> int:
    timer = Timer(
        title=args.title,
        date=_parse_when(args.date, settings),
        is_countdown=not args.from_date,
        display_mode=DisplayMode(args.mode),
    )
    result = _services(settings).timers.add(timer)
    if not result.success:
        logger.error("Could not save timer: %s", result.error)
        return 1
    print(timer.id)
    return 0


def cmd_calendar(args: argparse.Namespace, settings: Settings) -> int:
    now = datetime.now(settings.zone)
    grid = _services(settings).calendar.grid(args.offset, now, pad_trailing=args.pad)

    print(month_title(grid.spec))
    print(" ".join(f"{label:>4}" for label in weekday_labels(grid.spec.first_weekday)))
    for week in grid.weeks():
        cells = []
        for day in week:
            if day is None:
                cells.append("    ")
                continue
            mark = "*" if grid.has_marker(day) else " "
            text = f"[{day.day}]" if is_today(day, now) else str(day.day)
            cells.append(f"{text:>3}{mark}")
        print(" ".join(cells).rstrip())
    return 0


def cmd_calc(args: argparse.Namespace, settings: Settings) -> int:
    print(calculate([parse_term(term) for term in args.terms]))
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="datebook", description=__doc__)
    parser.add_argument("-v", "--verbose", action="store_true", help="debug logging")
    parser.add_argument("--env-file", default=None, help="path to a .env file")
    sub = parser.add_subparsers(dest="command", required=True)

    p = sub.add_parser("timers", help="list timers with their current value")
    p.set_defaults(handler=cmd_timers)

    p = sub.add_parser("add-timer", help="create a countdown or from-date timer")
    p.add_argument("title")
    p.add_argument("date", help="target date, e.g. '2026-12-31 18:00'")
    p.add_argument("--from-date", action="store_true", help="count up from the date")
    p.add_argument(
        "--mode",
        choices=[mode.value for mode in DisplayMode],
        default=DisplayMode.AUTO.value,
    )
    p.set_defaults(handler=cmd_add_timer)

    p = sub.add_parser("calendar", help="print a month grid with event markers")
    p.add_argument("--offset", type=int, default=0, help="months from the current one")
    p.add_argument("--pad", action="store_true", help="pad the last week row")
    p.set_defaults(handler=cmd_calendar)

    p = sub.add_parser("calc", help="add and subtract H:M:S durations")
    p.add_argument("terms", nargs="+", help="e.g. -- 1:00:00 -0:30:00 (use -- before negative terms)")
    p.set_defaults(handler=cmd_calc)

    return parser


def main(argv: Sequence[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        settings = load_settings(args.env_file)
        return args.handler(args, settings)
    except (ValueError, ParserError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_INVALID


if __name__ == "__main__":
    sys.exit(main())
