"""Datetime utilities with consistent local timezone handling.

Completion instants are recorded in the user's local zone and written to disk
as ISO-8601 strings with an explicit offset, so a file stays meaningful if the
machine's zone changes later.
"""

from datetime import datetime, timezone
from typing import Optional

from dateutil import tz


def local_zone():
    """Return the system's local timezone as a DST-aware tzinfo."""
    return tz.tzlocal()


def now_local() -> datetime:
    """Return the current datetime in the local timezone.

    Returns:
        Current datetime with tzinfo set to the local zone
    """
    return datetime.now(local_zone())


def ensure_aware(dt: Optional[datetime]) -> Optional[datetime]:
    """Ensure datetime is timezone-aware, assuming local time if naive.

    Args:
        dt: Datetime to check/convert, or None

    Returns:
        Timezone-aware datetime, or None if input was None
    """
    if dt is None:
        return None

    if dt.tzinfo is None:
        # Naive datetime - assume local wall-clock time
        return dt.replace(tzinfo=local_zone())

    return dt


def to_utc(dt: datetime) -> datetime:
    """Convert an aware datetime to UTC for instant comparisons.

    Aware datetimes sharing a tzinfo object are compared and subtracted by
    wall-clock time in Python, which is off by the DST shift across a
    transition. Comparing in UTC avoids that.
    """
    return ensure_aware(dt).astimezone(timezone.utc)


def to_iso_string(dt: Optional[datetime]) -> Optional[str]:
    """Convert datetime to ISO string with a fixed UTC offset.

    Args:
        dt: Datetime to convert, or None

    Returns:
        ISO format string with offset, or None if input was None
    """
    if dt is None:
        return None

    aware_dt = ensure_aware(dt)
    offset = aware_dt.utcoffset()
    return aware_dt.replace(tzinfo=timezone(offset)).isoformat()


def parse_iso(value: Optional[str]) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp written by to_iso_string.

    Raises:
        ValueError: If the string is not a valid ISO-8601 timestamp
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        # PyYAML turns unquoted timestamps into datetimes on its own
        return ensure_aware(value)
    return ensure_aware(datetime.fromisoformat(str(value)))
