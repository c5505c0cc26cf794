from datetime import datetime, timezone


def utcnow() -> datetime:
    """Current wall-clock time, timezone-aware UTC."""
    return datetime.now(timezone.utc)


def datetime_string(now: datetime | None = None) -> str:
    """ISO-8601 timestamp for `now` (defaults to the current time)."""
    return (now or utcnow()).isoformat()
