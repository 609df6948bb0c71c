"""UTC time helpers shared by the scheduler, the API and the CLI."""
from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Union

Timestamp = Union[datetime, int, float]


def now_utc() -> datetime:
    return datetime.now(timezone.utc)


def to_utc(value: Timestamp) -> datetime:
    """Coerce a datetime or epoch milliseconds to an aware UTC datetime.

    Naive datetimes are taken as UTC.
    """
    if isinstance(value, bool):
        raise TypeError("timestamp must be a datetime or epoch milliseconds")
    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)
    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value / 1000, tz=timezone.utc)
    raise TypeError("timestamp must be a datetime or epoch milliseconds")


def to_epoch_ms(value: datetime) -> int:
    delta = to_utc(value) - datetime(1970, 1, 1, tzinfo=timezone.utc)
    return (delta.days * 86_400 + delta.seconds) * 1000 + delta.microseconds // 1000


def iso_z(value: datetime) -> str:
    """Format a datetime as ISO-8601 UTC with millisecond precision and a Z suffix."""
    return to_utc(value).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def parse_iso_ts(value: str) -> datetime:
    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    return to_utc(datetime.fromisoformat(text))


def to_utc_date(value: Union[date, datetime, str]) -> date:
    """Resolve a calendar-day argument to a UTC ``date``.

    Accepts a ``date``, a ``datetime`` (converted to UTC first) or a
    fixed-width ``YYYY-MM-DD`` string.
    """
    if isinstance(value, datetime):
        return to_utc(value).date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        if len(text) != 10:
            raise ValueError(f"Invalid calendar date {value!r}, expected YYYY-MM-DD")
        return date.fromisoformat(text)
    raise TypeError("date must be a date, datetime or YYYY-MM-DD string")
