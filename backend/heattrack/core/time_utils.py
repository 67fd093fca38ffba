from datetime import datetime, timezone


def utc_now() -> datetime:
    """Current instant as a timezone-aware UTC datetime."""
    return datetime.now(timezone.utc)


def ensure_utc(dt: datetime) -> datetime:
    """Convert a datetime to aware UTC.

    - If `dt` has no tzinfo, assume it is already UTC (SQLite hands back
      naive values for DateTime columns).
    - Otherwise convert from its own offset.
    """
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def to_naive_utc(dt: datetime) -> datetime:
    """Aware/naive datetime -> naive UTC, the form stored in `timestamp_utc`."""
    return ensure_utc(dt).replace(tzinfo=None)

