from __future__ import annotations

from datetime import date, datetime, time

from ..core.constants import SCHEDULE_WEEKS
from ..core.exceptions import ValidationError


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def parse_hhmm(value: str, field_name: str = "Time") -> time:
    v = (value or "").strip()
    for fmt in ("%H:%M", "%H:%M:%S"):
        try:
            return datetime.strptime(v, fmt).time()
        except ValueError:
            continue
    raise ValidationError(f"{field_name} is not a valid time (HH:MM)")


def now_local() -> datetime:
    """Current local time.

    Note: Wrapped so tests can patch/mocked easier.
    """
    return datetime.now()


def weekday_name(day: date) -> str:
    return day.strftime("%A")


def rotation_week(day: date) -> int:
    """Week number (1-4) of the four-week timetable rotation for a date."""
    iso_week = day.isocalendar()[1]
    return SCHEDULE_WEEKS[(iso_week - 1) % len(SCHEDULE_WEEKS)]


def fmt_time(t) -> str:
    # Accept datetime.time (expected), but also tolerate timedelta/str from drivers.
    try:
        return t.strftime("%H:%M")
    except AttributeError:
        return str(t)[:5]
