"""Datetime parsing and formatting: lax input -> strict output."""

from __future__ import annotations

from datetime import datetime, timezone

import pendulum


def parse_datetime(value: str | datetime, default_tz: str = "UTC") -> datetime:
    """Parse a lax datetime string into a timezone-aware datetime.

    Accepts the millisecond ``Z`` form this service writes as well as hand-
    edited variants:
    - 2024-01-03T10:00:00.000Z
    - 2024-01-03T10:00:00+02:00
    - 2024-01-03 10:00
    - 2024-01-03

    Missing timezone defaults to default_tz.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            tz = pendulum.timezone(default_tz)
            value = value.replace(tzinfo=tz)  # type: ignore[arg-type]
        return value

    parsed = pendulum.parse(value.strip(), tz=default_tz, strict=False)
    if isinstance(parsed, pendulum.DateTime):
        return parsed
    # pendulum.parse returns Date for date-only strings
    if isinstance(parsed, pendulum.Date):
        return pendulum.datetime(parsed.year, parsed.month, parsed.day, tz=default_tz)
    # Time, Duration and Interval carry no calendar date
    raise ValueError(f"Not a date or datetime: {value!r}")


def from_timestamp(epoch_seconds: float) -> datetime:
    """Convert a filesystem timestamp to an aware UTC datetime."""
    return datetime.fromtimestamp(epoch_seconds, tz=timezone.utc)


def now_utc() -> datetime:
    """Return the current UTC datetime."""
    return datetime.now(timezone.utc)


def format_iso(dt: datetime) -> str:
    """Format a datetime as ISO 8601 UTC with milliseconds and a ``Z`` suffix."""
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    utc = dt.astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.") + f"{utc.microsecond // 1000:03d}Z"
