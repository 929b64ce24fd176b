"""Half-open interval arithmetic on absolute instants.

All comparisons run on naive UTC datetimes, the same representation the
database stores. Durations use integer microseconds; nothing here goes through
floating point.
"""

from datetime import UTC, datetime, timedelta

_MICROSECOND = timedelta(microseconds=1)
_MINUTE_US = 60_000_000


def normalize_instant(value: datetime) -> datetime:
    """Convert an instant to naive UTC.

    Aware datetimes are converted to UTC; naive datetimes are taken to already
    be UTC and returned unchanged.
    """
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


def intervals_overlap(
    a_start: datetime, a_end: datetime, b_start: datetime, b_end: datetime
) -> bool:
    """Return True when [a_start, a_end) and [b_start, b_end) share an instant.

    Adjacent intervals (a_end == b_start) do not overlap.
    """
    return a_start < b_end and a_end > b_start


def compute_duration_minutes(start: datetime, end: datetime) -> int:
    """Whole minutes between two instants, rounding half a minute up."""
    elapsed_us = (end - start) // _MICROSECOND
    return (elapsed_us + _MINUTE_US // 2) // _MINUTE_US
