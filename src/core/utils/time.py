"""
Time-related utilities for the application.

All timestamps are generated in UTC and serialized using
ISO-8601 format with a fixed microsecond precision so that
lexicographic order in DynamoDB equals chronological order.
"""

from datetime import datetime, timezone


def utc_now() -> datetime:
    """Return the current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Serialize an aware datetime as a sortable ISO-8601 UTC string.

    Example:
        2024-01-15T10:42:31.000000+00:00

    The microsecond part is always present; `datetime.isoformat()` would
    otherwise drop it for whole seconds and break fixed-width comparisons.
    """
    return value.astimezone(timezone.utc).isoformat(timespec="microseconds")


def utc_now_iso() -> str:
    """Return current UTC time in sortable ISO-8601 format."""
    return to_iso(utc_now())
