"""
Time calculations and formatting.

The scheduler works in UTC; local time only matters when parsing the
start time entered by the user and when rendering the breakdown.
"""

from datetime import datetime, timedelta

import pytz


def hours_to_timedelta(hours: float) -> timedelta:
    """Convert fractional hours to a timedelta."""
    return timedelta(hours=hours)


def parse_iso_datetime(dt_str: str) -> datetime:
    """Parse "YYYY-MM-DDTHH:MM" (optionally with seconds or offset)."""
    return datetime.fromisoformat(dt_str.replace("Z", "+00:00"))


def localize_start_time(dt_str: str, tz_name: str) -> datetime:
    """
    Interpret a wall-clock start time in the given timezone.

    Args:
        dt_str: ISO datetime, local time unless it carries an offset
        tz_name: IANA timezone name (e.g., "Europe/Vilnius")

    Returns:
        Timezone-aware datetime in UTC
    """
    parsed = parse_iso_datetime(dt_str)
    if parsed.tzinfo is None:
        parsed = pytz.timezone(tz_name).localize(parsed)
    return parsed.astimezone(pytz.UTC)


def get_current_datetime_in_tz(tz_name: str) -> datetime:
    """
    Current time as a timezone-aware UTC datetime, truncated to the minute.

    Used as the trip start when the caller did not pick one. The timezone
    is validated here so a bad name fails the same way as an explicit start.
    """
    pytz.timezone(tz_name)
    now_utc = datetime.now(pytz.UTC)
    return now_utc.replace(second=0, microsecond=0)


def to_local(dt: datetime, tz_name: str) -> datetime:
    """Convert an aware datetime to local time (naive datetimes are assumed UTC)."""
    if dt.tzinfo is None:
        dt = pytz.UTC.localize(dt)
    return dt.astimezone(pytz.timezone(tz_name))


def format_time(dt: datetime) -> str:
    """Format as "HH:MM"."""
    return f"{dt.hour:02d}:{dt.minute:02d}"


def format_datetime(dt: datetime) -> str:
    """Format as "YYYY-MM-DD HH:MM"."""
    return f"{dt.year}-{dt.month:02d}-{dt.day:02d} {format_time(dt)}"


def format_hours(hours: float) -> str:
    """
    Format fractional hours as "9h 45m".

    Minutes are rounded to the nearest whole minute before splitting.
    """
    total = round(hours * 60)
    return f"{total // 60}h {total % 60:02d}m"


def is_valid_timezone(tz_name: str) -> bool:
    """True if pytz knows the IANA timezone name."""
    return tz_name in pytz.all_timezones_set
