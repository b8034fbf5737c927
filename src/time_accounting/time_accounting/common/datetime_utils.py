from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta, timezone, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from ..core.constants import MINUTES_PER_DAY

_HHMM = re.compile(r"^([01][0-9]|2[0-3]):([0-5][0-9])$")


def get_timezone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def now_local(tz: tzinfo) -> datetime:
    """Current time in the operating timezone.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now(tz)


def is_hhmm(value: Optional[str]) -> bool:
    return bool(value) and _HHMM.match(value) is not None


def parse_hhmm(value: Optional[str]) -> Optional[int]:
    """"HH:MM" -> minute of day (0..1439). Anything else -> None."""
    if not value:
        return None
    parts = value.strip().split(":")
    if len(parts) < 2:
        return None
    try:
        total = int(parts[0]) * 60 + int(parts[1])
    except ValueError:
        return None
    if total < 0 or total >= MINUTES_PER_DAY:
        return None
    return total


def format_hhmm(minutes: int) -> str:
    clamped = max(0, min(MINUTES_PER_DAY - 1, int(minutes)))
    return f"{clamped // 60:02d}:{clamped % 60:02d}"


def as_aware(value: datetime) -> datetime:
    """Naive timestamps coming from the store are UTC."""
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def to_local(value: datetime, tz: tzinfo) -> datetime:
    return as_aware(value).astimezone(tz)


def minute_of_day(value: datetime) -> int:
    return value.hour * 60 + value.minute


def day_bounds(work_date: date, tz: tzinfo) -> tuple[datetime, datetime]:
    """[local midnight, next local midnight) for the calendar date."""
    start = datetime.combine(work_date, time(0, 0), tzinfo=tz)
    end = datetime.combine(work_date + timedelta(days=1), time(0, 0), tzinfo=tz)
    return start, end
