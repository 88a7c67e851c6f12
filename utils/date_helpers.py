"""Date and time utility functions."""
from datetime import datetime
from typing import Optional

import pytz

from constants import DEFAULT_TIMEZONE, NOT_AVAILABLE, TMS_DATETIME_FORMAT


def get_current_utc() -> datetime:
    """
    Get current UTC datetime.

    Returns:
        Current UTC datetime
    """
    return datetime.now(pytz.UTC)


def to_utc(dt: datetime) -> datetime:
    """
    Normalise a datetime to UTC.

    Args:
        dt: Datetime to convert (assumed UTC if naive)

    Returns:
        Timezone-aware UTC datetime
    """
    if dt.tzinfo is None:
        return pytz.UTC.localize(dt)
    return dt.astimezone(pytz.UTC)


def format_tms_datetime(dt: datetime) -> str:
    """
    Format a datetime the way the TMS expects it (UTC, second precision).

    Args:
        dt: Datetime to format

    Returns:
        String such as 2025-07-05T14:00:00Z
    """
    return to_utc(dt).strftime(TMS_DATETIME_FORMAT)


def parse_tms_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 timestamp from a TMS response.

    Args:
        value: Timestamp string, possibly with a trailing Z

    Returns:
        UTC datetime, or None if missing or unparseable
    """
    if not value:
        return None
    try:
        return to_utc(datetime.fromisoformat(value.replace("Z", "+00:00")))
    except ValueError:
        return None


def resolve_timezone(name: Optional[str], default: str = DEFAULT_TIMEZONE) -> str:
    """
    Return ``name`` if it is a known IANA timezone, else ``default``.

    Args:
        name: Candidate timezone name
        default: Fallback timezone

    Returns:
        Timezone name
    """
    if not name or name == NOT_AVAILABLE:
        return default
    try:
        pytz.timezone(name)
    except pytz.UnknownTimeZoneError:
        return default
    return name
