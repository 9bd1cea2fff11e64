"""
Standardized Date/Time Handling Utilities

All "today", "yesterday" and calendar-day decisions in the engine go through
this module so that a single clock and a single timezone drive them.

RULES:
- Read the clock once per operation (now_in_timezone()) and pass the value down
- Calendar days are taken in the timezone of the injected "now"
- Day markers persisted on Progress use the to_date_string() form
"""

import logging
from datetime import datetime, date, tzinfo
from typing import Optional
from zoneinfo import ZoneInfo

from gamedo.config import GAMEDO_TIMEZONE

logger = logging.getLogger(__name__)


def get_timezone(tz_name: Optional[str] = None) -> ZoneInfo:
    """
    Resolve an IANA timezone name, falling back to the configured zone

    Args:
        tz_name: IANA timezone (e.g. "Europe/Berlin"); None uses GAMEDO_TIMEZONE

    Returns:
        ZoneInfo object
    """
    name = tz_name or GAMEDO_TIMEZONE
    try:
        return ZoneInfo(name)
    except Exception as e:
        logger.error(f"Invalid timezone '{name}': {e}")
        return ZoneInfo("UTC")


def now_in_timezone(tz_name: Optional[str] = None) -> datetime:
    """
    Get current datetime in the configured timezone (timezone-aware)

    This is the only place the engine reads the wall clock.
    """
    return datetime.now(get_timezone(tz_name))


def local_day(dt: datetime, tz: Optional[tzinfo] = None) -> date:
    """
    Calendar day of a timestamp

    Aware datetimes are converted to tz first when one is given; naive
    datetimes are taken as already local.
    """
    if tz is not None and dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.date()


def local_hour(dt: datetime, tz: Optional[tzinfo] = None) -> int:
    """Hour of day (0-23) of a timestamp in the given timezone"""
    if tz is not None and dt.tzinfo is not None:
        dt = dt.astimezone(tz)
    return dt.hour


def to_date_string(day: date) -> str:
    """
    Format a day marker, e.g. "Mon Oct 19 2026"

    Uses fixed English names regardless of locale.
    """
    weekday = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")[day.weekday()]
    month = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
             "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")[day.month - 1]
    return f"{weekday} {month} {day.day:02d} {day.year}"


def parse_date_string(value: Optional[str]) -> Optional[date]:
    """
    Parse a day marker written by to_date_string()

    ISO dates ("2026-10-19") are accepted too. Returns None for missing or
    unparseable values; a bad marker only disables the streak grace period.
    """
    if not value:
        return None

    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass

    parts = text.split()
    if len(parts) != 4:
        logger.warning(f"Unrecognized date marker: {value!r}")
        return None

    _, month_name, day_str, year_str = parts
    months = ("jan", "feb", "mar", "apr", "may", "jun",
              "jul", "aug", "sep", "oct", "nov", "dec")
    try:
        month = months.index(month_name[:3].lower()) + 1
        return date(int(year_str), month, int(day_str))
    except ValueError:
        logger.warning(f"Unrecognized date marker: {value!r}")
        return None


def days_between(start: date, end: date) -> int:
    """Whole calendar days from start to end (negative if end is earlier)"""
    return (end - start).days
