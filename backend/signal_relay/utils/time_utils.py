"""
PURPOSE: Time utilities for notification timestamps and liveness reporting.
All calculations are UTC-based; localisation happens only when rendering.
"""

from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def get_utc_now() -> datetime:
    """
    PURPOSE: Return the current UTC time as a timezone-aware datetime object.

    Returns:
        datetime: Current UTC time with timezone info.
    """
    return datetime.now(timezone.utc)


def as_utc(moment: datetime) -> datetime:
    """Return moment converted to UTC; naive values are assumed to be UTC already."""
    if moment.tzinfo is None:
        return moment.replace(tzinfo=timezone.utc)
    return moment.astimezone(timezone.utc)


def to_iso_utc(moment: datetime) -> str:
    """
    PURPOSE: Render a datetime as an ISO-8601 UTC string with a trailing "Z".

    Args:
        moment: Datetime to render.

    Returns:
        str: e.g. "2024-05-01T12:30:00.123000Z"
    """
    return as_utc(moment).isoformat().replace("+00:00", "Z")


def format_for_notification(moment: datetime, tz_name: str = "UTC") -> str:
    """
    PURPOSE: Render a datetime for humans reading a chat notification.

    Args:
        moment: Datetime to render (naive values are treated as UTC).
        tz_name: IANA timezone the reader expects.

    Returns:
        str: e.g. "2024-05-01 08:30:00 (America/New_York)"
    """
    localized = as_utc(moment).astimezone(ZoneInfo(tz_name))
    return f"{localized:%Y-%m-%d %H:%M:%S} ({tz_name})"
