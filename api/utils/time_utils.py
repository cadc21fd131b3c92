"""Time utilities."""
from datetime import datetime, timezone
from zoneinfo import ZoneInfo


def utc_now() -> datetime:
    """Get current UTC time."""
    return datetime.now(timezone.utc)


def parse_iso_timestamp(value: object) -> datetime | None:
    """Parse ISO timestamp string to datetime."""
    if not isinstance(value, str):
        return None
    raw = value.strip()
    if not raw:
        return None
    if raw.endswith("Z"):
        raw = raw[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(raw)
    except ValueError:
        return None


def to_utc_datetime(value: object) -> datetime | None:
    """Convert any stored or client-side time value to an aware UTC datetime.

    Accepts datetimes (naive ones are taken as UTC), epoch seconds,
    ``{"seconds": ..., "nanoseconds": ...}`` or ``{"_seconds": ...}``
    objects and ISO strings. Returns ``None`` for anything else.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)
    if isinstance(value, dict):
        seconds = value.get("seconds", value.get("_seconds"))
        nanoseconds = value.get("nanoseconds", value.get("_nanoseconds", 0))
        if isinstance(seconds, bool) or not isinstance(seconds, (int, float)):
            return None
        if isinstance(nanoseconds, bool) or not isinstance(nanoseconds, (int, float)):
            nanoseconds = 0
        return datetime.fromtimestamp(seconds + nanoseconds / 1e9, tz=timezone.utc)
    parsed = parse_iso_timestamp(value)
    if parsed is None:
        return None
    return to_utc_datetime(parsed)


def format_local(value: datetime, tz_name: str) -> str:
    """Format a timestamp for people reading notifications."""
    aware = to_utc_datetime(value) or utc_now()
    local = aware.astimezone(ZoneInfo(tz_name))
    return local.strftime("%B %d, %Y %I:%M %p")
