from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Optional


def utcnow() -> datetime:
    """Naive UTC timestamp stamped on invoices, tickets and sessions."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def today_iso() -> str:
    """Business date used for VAT invoices when the document carries none."""
    return date.today().isoformat()


def parse_iso_datetime(value: Optional[str]) -> Optional[datetime]:
    """
    Read a client timestamp as naive UTC.

    Empty input gives None. Offsets (including a trailing Z) are converted
    to UTC; values without one are taken as UTC already.
    """
    text = (value or "").strip()
    if not text:
        return None
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"

    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is not None:
        parsed = parsed.astimezone(timezone.utc).replace(tzinfo=None)
    return parsed


def parse_range_bound(value: Optional[str], *, end: bool = False) -> Optional[datetime]:
    """
    Like parse_iso_datetime, but a bare date ("2024-05-01") covers the whole
    day: as an end bound it runs to the end of that day.
    """
    text = (value or "").strip()
    if len(text) == 10 and text.count("-") == 2:
        day = date.fromisoformat(text)
        return datetime.combine(day, time.max if end else time.min)
    return parse_iso_datetime(text)


def to_utc_z(dt: Optional[datetime]) -> Optional[str]:
    """Second-precision ISO string with a Z suffix; naive input counts as UTC."""
    if dt is None:
        return None
    if dt.tzinfo is not None:
        dt = dt.astimezone(timezone.utc).replace(tzinfo=None)
    return dt.replace(microsecond=0).isoformat() + "Z"
