"""Timezone utilities. Position and history instants are handled in US/Eastern market time."""

from datetime import datetime
from typing import Optional

import pytz
from dateutil import parser as date_parser

EASTERN_TZ = pytz.timezone("US/Eastern")


def now_eastern() -> datetime:
    """Sample the current instant in US/Eastern; callers sample once per computation."""
    return datetime.now(EASTERN_TZ)


def to_eastern(dt: datetime) -> datetime:
    """Convert a datetime to US/Eastern; a naive value is taken to be Eastern already."""
    if dt.tzinfo is None:
        return EASTERN_TZ.localize(dt)
    return dt.astimezone(EASTERN_TZ)


def parse_datetime_eastern(value: str, default_tz: Optional[pytz.BaseTzInfo] = None) -> datetime:
    """
    Parse a purchase date, action date or evaluation time string into US/Eastern.

    Strings without an offset are read in default_tz (US/Eastern if not given).
    """
    dt = date_parser.parse(value)
    if dt.tzinfo is None:
        dt = (default_tz or EASTERN_TZ).localize(dt)
    return to_eastern(dt)


def start_of_year(dt: datetime) -> datetime:
    """
    Return midnight on January 1st of dt's year, in dt's own timezone.

    pytz zones need localize() so the January offset (EST, not EDT) is used.
    """
    jan_first = datetime(dt.year, 1, 1)
    tz = dt.tzinfo
    if tz is None:
        return jan_first
    if hasattr(tz, "localize"):
        return tz.localize(jan_first)
    return jan_first.replace(tzinfo=tz)


def normalize_offset(dt: datetime) -> datetime:
    """
    Re-label an aware datetime with its zone's offset at that instant.

    Arithmetic on pytz datetimes keeps the starting offset, so a step across
    a DST change needs normalize() to show the right Eastern wall clock.
    The instant itself is unchanged.
    """
    tz = dt.tzinfo
    if tz is not None and hasattr(tz, "normalize"):
        return tz.normalize(dt)
    return dt
