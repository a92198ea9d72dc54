"""Timestamp helpers. All scheduling math runs on timezone-aware UTC datetimes."""

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def as_utc(dt: datetime) -> datetime:
    """Treat naive datetimes as UTC; convert aware ones to UTC."""
    if dt.tzinfo is None:
        return dt.replace(tzinfo=timezone.utc)
    return dt.astimezone(timezone.utc)


def calendar_date(dt: datetime) -> date:
    """UTC calendar date of a timestamp."""
    return as_utc(dt).date()


def day_key(d: date) -> str:
    """Key used in Stats.study_days."""
    return d.isoformat()


def to_iso(dt: datetime) -> str:
    """Serialize as ISO-8601 UTC with millisecond precision and a 'Z' suffix."""
    dt = as_utc(dt)
    return dt.strftime("%Y-%m-%dT%H:%M:%S.") + f"{dt.microsecond // 1000:03d}Z"


def parse_iso(value: str) -> datetime:
    """Parse an ISO-8601 timestamp; accepts a trailing 'Z'."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    return as_utc(datetime.fromisoformat(value))
