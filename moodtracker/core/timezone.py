# moodtracker/core/timezone.py
from datetime import date, datetime, time, timezone
from typing import Optional

from moodtracker.core.errors import ValidationError


def utc_now() -> datetime:
    """Current time in UTC (timezone aware)"""
    return datetime.now(timezone.utc)


def to_utc(value: datetime) -> datetime:
    # naive values are assumed to already be UTC
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def format_time(dt: Optional[datetime]) -> Optional[str]:
    if dt is None:
        return None
    return to_utc(dt).isoformat()


def parse_time_bound(value, name: str, end_of_day: bool = False) -> Optional[datetime]:
    """Parse a ``from``/``to`` query bound.

    Accepts ISO-8601 datetimes and bare dates. A bare date used as an upper
    bound covers the whole day, so ``to=2025-08-05`` includes entries logged
    that afternoon.
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return to_utc(value)
    if isinstance(value, date):
        return datetime.combine(value, time.max if end_of_day else time.min, tzinfo=timezone.utc)
    if not isinstance(value, str):
        raise ValidationError(f"'{name}' must be an ISO-8601 date or datetime")

    raw = value.strip()
    try:
        if len(raw) == 10:
            d = date.fromisoformat(raw)
            return datetime.combine(d, time.max if end_of_day else time.min, tzinfo=timezone.utc)
        if raw.endswith("Z"):
            raw = raw[:-1] + "+00:00"
        return to_utc(datetime.fromisoformat(raw))
    except ValueError:
        raise ValidationError(f"'{name}' must be an ISO-8601 date or datetime")
