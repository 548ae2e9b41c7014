"""
Timestamp helpers.

All datetimes inside the service are naive UTC, matching what the database
columns store. Conversion to and from ISO-8601 happens at the boundaries.
"""
from datetime import datetime, timezone
from typing import Any, Optional


def utc_now() -> datetime:
    """Current time as naive UTC."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_iso8601(value: Any) -> Optional[datetime]:
    """
    Parse an ISO-8601 string (with or without a trailing Z) into naive UTC.

    Returns None for empty or unparseable input.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_naive_utc(value)
    if not isinstance(value, str):
        return None

    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    return to_naive_utc(parsed)


def from_unix_seconds(value: Any) -> Optional[datetime]:
    if value is None:
        return None
    try:
        return datetime.fromtimestamp(int(value), tz=timezone.utc).replace(tzinfo=None)
    except (TypeError, ValueError, OverflowError):
        return None


def to_iso8601(value: Optional[datetime]) -> Optional[str]:
    """Format naive UTC as 2024-01-01T12:00:00.000Z."""
    if value is None:
        return None
    return to_naive_utc(value).isoformat(timespec="milliseconds") + "Z"
