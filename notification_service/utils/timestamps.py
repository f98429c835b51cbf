"""UTC timestamp helpers.

Everything in memory is an aware UTC datetime. The notification log stores
ISO 8601 strings with a ``Z`` suffix, and event payloads carry dates as
loosely formatted strings that templates show in a friendlier form.
"""

from datetime import datetime, timezone
from typing import Optional

STORAGE_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(dt: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC; aware ones are converted."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO 8601 date or datetime string into aware UTC.

    Accepts a trailing ``Z`` and bare dates (``2025-11-04``). Returns None
    for blank or unparseable input.

    Example:
        >>> parse_iso_datetime("2025-11-04T12:00:00Z").hour
        12
    """
    if not value or not value.strip():
        return None

    cleaned = value.strip()
    if cleaned.endswith("Z"):
        cleaned = cleaned[:-1] + "+00:00"

    try:
        return ensure_utc(datetime.fromisoformat(cleaned))
    except ValueError:
        return None


def format_iso(dt: Optional[datetime]) -> Optional[str]:
    """Storage form: UTC with microseconds and a ``Z`` suffix, None for None."""
    dt = ensure_utc(dt)
    if dt is None:
        return None
    return dt.strftime(STORAGE_FORMAT)


def format_display_date(value: Optional[str]) -> Optional[str]:
    """Render a payload date for an email, e.g. ``March 4, 2026``.

    Strings that aren't ISO dates are returned unchanged so a producer's
    own wording ("in 7 days") still shows up.
    """
    if not value:
        return None
    dt = parse_iso_datetime(value)
    if dt is None:
        return value
    return f"{dt.strftime('%B')} {dt.day}, {dt.year}"


def format_display_datetime(value: Optional[str]) -> Optional[str]:
    """Like ``format_display_date`` with the time: ``2026-03-04 09:15 UTC``."""
    if not value:
        return None
    dt = parse_iso_datetime(value)
    if dt is None:
        return value
    return dt.strftime("%Y-%m-%d %H:%M UTC")
