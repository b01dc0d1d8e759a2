"""
timeutils.py: Instant parsing and normalization shared by the mapper and comparator.
"""
from datetime import datetime, timedelta, timezone
from typing import Optional

from dateutil.parser import isoparse

EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)


def parse_instant(value: str) -> datetime:
    """
    Parse an ISO-8601 date or date-time string into an aware UTC datetime.

    Date-only values ("2024-01-01") are read as midnight UTC. Date-times
    without an offset are assumed to be UTC.

    Raises:
        ValueError: the string is not ISO-8601.
    """
    parsed = isoparse(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def to_discord_timestamp(value: str) -> str:
    """Render an ISO-8601 value as a UTC timestamp with millisecond precision."""
    instant = parse_instant(value)
    return instant.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_epoch_millis(value: Optional[str]) -> Optional[int]:
    # None and empty strings both mean "no instant"
    if not value:
        return None
    return (parse_instant(value) - EPOCH) // timedelta(milliseconds=1)
