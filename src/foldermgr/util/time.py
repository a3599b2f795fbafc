from __future__ import annotations

from datetime import datetime, timezone
from typing import Callable

# Zero-argument callable returning a tz-aware "now"; injected into ItemStore.
Clock = Callable[[], datetime]


def now_utc() -> datetime:
    """Return current time as tz-aware UTC datetime."""
    return datetime.now(timezone.utc)


def fixed_clock(dt: datetime) -> Clock:
    """Return a clock that always reports `dt` (tz-aware)."""
    value = normalize_dt(dt)
    return lambda: value


def normalize_dt(dt: datetime) -> datetime:
    """Ensure datetime is tz-aware. Raises if naive."""
    if not isinstance(dt, datetime):
        raise TypeError("dt must be a datetime")
    if dt.tzinfo is None:
        raise ValueError("naive datetime is not allowed; timezone-aware required")
    return dt


def from_epoch_ms(value: int) -> datetime:
    """
    Convert a millisecond epoch timestamp (as reported by browser File
    objects' `lastModified`) into a tz-aware UTC datetime.
    """
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError("epoch milliseconds must be an int")
    seconds, millis = divmod(value, 1000)
    return datetime.fromtimestamp(seconds, timezone.utc).replace(microsecond=millis * 1000)


def parse_rfc3339(value: str) -> datetime:
    """
    Parse a stored timestamp into a tz-aware UTC datetime.

    Both 'Z' and numeric offsets are accepted; naive values are rejected.
    """
    if not isinstance(value, str) or not value.strip():
        raise ValueError("RFC3339 value must be a non-empty string")

    text = value.strip()
    if text[-1] in "zZ":
        # fromisoformat on 3.10 has no 'Z' support
        text = text[:-1] + "+00:00"
    return normalize_dt(datetime.fromisoformat(text)).astimezone(timezone.utc)


def to_rfc3339(dt: datetime) -> str:
    """Format as UTC with a 'Z' suffix and microsecond precision."""
    utc = normalize_dt(dt).astimezone(timezone.utc)
    return utc.strftime("%Y-%m-%dT%H:%M:%S.%fZ")
