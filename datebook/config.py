"""Runtime settings read from the environment.

Variables:
    DATEBOOK_TZ: IANA timezone used for calendar arithmetic (default "UTC")
    DATEBOOK_FIRST_WEEKDAY: day name or 0-6 index, 0=Sunday (default "monday")
    DATEBOOK_DATA_DIR: directory for stored records (default "~/.datebook")
"""

import os
from dataclasses import dataclass
from pathlib import Path
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from dotenv import load_dotenv

from datebook.grid import MONDAY, resolve_weekday


@dataclass(frozen=True, kw_only=True)
class Settings:
    tz: str = "UTC"
    first_weekday: int = MONDAY
    data_dir: Path = Path("~/.datebook")

    @property
    def zone(self) -> ZoneInfo:
        return ZoneInfo(self.tz)


def load_settings(env_file: str | Path | None = None) -> Settings:
    """Build settings from the environment, after loading a ``.env`` file.

    Variables already set in the process environment win over the file.

    Raises:
        ValueError: If the timezone or first weekday is invalid
    """
    load_dotenv(dotenv_path=env_file)

    tz = os.getenv("DATEBOOK_TZ", "UTC")
    try:
        ZoneInfo(tz)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValueError(
            f"DATEBOOK_TZ must be an IANA timezone name, got {tz!r}\n"
            f"Examples: 'UTC', 'Europe/Berlin', 'US/Pacific'"
        ) from exc

    raw_weekday = os.getenv("DATEBOOK_FIRST_WEEKDAY", "monday").strip()
    first_weekday = resolve_weekday(
        int(raw_weekday) if raw_weekday.isdigit() else raw_weekday
    )

    data_dir = Path(os.getenv("DATEBOOK_DATA_DIR", "~/.datebook")).expanduser()
    return Settings(tz=tz, first_weekday=first_weekday, data_dir=data_dir)
