"""
Timezone utilities for Family Calendar.

Provides the timezone conversions shared by the event model and the date
binning code. Instants are kept timezone-aware; calendar days are always
derived in the configured local timezone.
"""

from datetime import datetime, date
import math
import time as _time
import pytz


# Default timezone - can be overridden by config
_local_timezone_name: str = "Europe/Amsterdam"


def set_timezone(timezone_name: str):
    """Set the local timezone for the application."""
    global _local_timezone_name
    _local_timezone_name = timezone_name


def get_timezone_name() -> str:
    """Get the configured local timezone name."""
    return _local_timezone_name


def get_local_timezone():
    """
    Get the local timezone as a pytz timezone object.

    Returns:
        pytz timezone object for the configured local timezone.
    """
    try:
        return pytz.timezone(_local_timezone_name)
    except pytz.UnknownTimeZoneError:
        # Fallback: try system timezone name
        try:
            return pytz.timezone(_time.tzname[0])
        except pytz.UnknownTimeZoneError:
            # Last resort: calculate offset and use fixed offset timezone
            is_dst = _time.localtime().tm_isdst
            if is_dst:
                offset_seconds = -_time.altzone
            else:
                offset_seconds = -_time.timezone
            return pytz.FixedOffset(offset_seconds // 60)


def localize(dt: datetime) -> datetime:
    """
    Make a datetime timezone-aware.

    Naive datetimes are interpreted as local wall-clock time; aware ones
    are returned unchanged.
    """
    if dt.tzinfo is None:
        return get_local_timezone().localize(dt)
    return dt


def to_local_datetime(dt: datetime) -> datetime:
    """
    Convert a datetime to the local timezone.

    Args:
        dt: A datetime object. Naive values are taken as local time.

    Returns:
        A timezone-aware datetime in the local timezone.
    """
    local_tz = get_local_timezone()
    if dt.tzinfo is None:
        return local_tz.localize(dt)
    return dt.astimezone(local_tz)


def to_local_date(value) -> date:
    """
    Get the local calendar day of a date or datetime.

    Aware datetimes are converted to the local timezone first, so an
    instant of 23:30 UTC lands on the next day east of Greenwich.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.date()
        return value.astimezone(get_local_timezone()).date()
    if isinstance(value, date):
        return value
    raise TypeError(f"Expected date or datetime, got {type(value).__name__}")


def local_now() -> datetime:
    """Current time as an aware datetime in the local timezone."""
    return datetime.now(get_local_timezone())


def local_today() -> date:
    """Today's date in the local timezone."""
    return local_now().date()


def from_timestamp(seconds: float) -> datetime:
    """
    Convert a Unix timestamp in seconds to an aware UTC datetime.

    Raises:
        ValueError: for NaN, infinite or out-of-range values.
    """
    if isinstance(seconds, bool) or not math.isfinite(seconds):
        raise ValueError(f"Not a valid timestamp: {seconds!r}")
    try:
        return datetime.fromtimestamp(seconds, tz=pytz.UTC)
    except (OverflowError, OSError) as e:
        raise ValueError(f"Timestamp out of range: {seconds!r}") from e


def to_timestamp(dt: datetime) -> int:
    """Convert a datetime to whole Unix seconds (naive values are local)."""
    return int(localize(dt).timestamp())
