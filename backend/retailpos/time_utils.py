# Overview: UTC time helpers shared by models, services and reports.

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone
from typing import Optional


def utcnow() -> datetime:
    """Current UTC time as a naive datetime (the storage convention)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def window_bounds(days: int, *, now: Optional[datetime] = None) -> tuple[datetime, datetime]:
    """(start, end) of the trailing `days`-day window ending now."""
    end = now or utcnow()
    return end - timedelta(days=days), end


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Parse an ISO-8601 date or datetime into a naive UTC datetime.

    Blank input gives None. A bare date means midnight UTC; naive times are
    taken as UTC; offsets (including a trailing "Z") are converted.
    Raises ValueError on anything else.
    """
    if value is None:
        return None
    text = value.strip()
    if not text:
        return None

    if len(text) == 10:
        d = date.fromisoformat(text)
        return datetime(d.year, d.month, d.day)

    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Second-precision ISO-8601 with a trailing 'Z'; naive input is UTC."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"
