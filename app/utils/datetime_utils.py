"""
Datetime utilities.

All timestamps are stored timezone-aware in UTC. Some backends (SQLite)
hand them back naive, so readers normalize through ``as_utc``.
"""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current UTC datetime, timezone-aware."""
    return datetime.now(UTC)


def as_utc(value: datetime | None) -> datetime | None:
    """
    Normalize a stored timestamp to an aware UTC datetime.

    Naive values are taken to be UTC already; aware values are converted.

    Args:
        value: Timestamp read from the database, or None

    Returns:
        Aware UTC datetime, or None if value is None
    """
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
