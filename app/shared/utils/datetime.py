"""UTC time helpers. Stored and compared datetimes are always timezone-aware UTC."""

from datetime import UTC, datetime


def utc_now() -> datetime:
    return datetime.now(UTC)


def ensure_utc(dt: datetime | None) -> datetime | None:
    """Treat naive values as UTC; convert aware values to UTC."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        return dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC)


def epoch_ms(dt: datetime | None = None) -> int:
    """Unix epoch milliseconds of dt, or of now.

    Slugs and upload object keys use this as their uniqueness suffix.
    """
    moment = ensure_utc(dt) or utc_now()
    return int(moment.timestamp() * 1000)
