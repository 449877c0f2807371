"""UTC helpers shared by models, services and schemas."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    """Current instant as an aware UTC datetime."""
    return datetime.now(UTC)


def as_utc(value: datetime) -> datetime:
    """Normalize a datetime to aware UTC.

    Naive values are taken to already be UTC; SQLite hands back naive
    timestamps for ``DateTime(timezone=True)`` columns.
    """
    if value.tzinfo is None:
        return value.replace(tzinfo=UTC)
    return value.astimezone(UTC)
