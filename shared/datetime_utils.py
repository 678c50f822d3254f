"""
Date/time helpers — framework-agnostic.

Records carry two time encodings: ISO-8601 strings with millisecond precision
and a trailing ``Z`` (createdAt / updatedAt), and integer epoch seconds
(expiresAt).
"""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """Return the current timezone-aware UTC time."""
    return datetime.now(timezone.utc)


def to_iso(value: datetime) -> str:
    """Format *value* as ``YYYY-MM-DDTHH:MM:SS.mmmZ`` in UTC.

    Naive datetimes are assumed to be UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.isoformat(timespec="milliseconds").replace("+00:00", "Z")


def to_epoch_seconds(value: datetime) -> int:
    """Return whole Unix epoch seconds for *value*."""
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    return int(value.timestamp())


def from_epoch_seconds(value: int) -> datetime:
    """Inverse of :func:`to_epoch_seconds`."""
    return datetime.fromtimestamp(int(value), tz=timezone.utc)
