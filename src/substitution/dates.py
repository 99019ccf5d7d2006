"""WebUntis date encoding.

The monitor endpoint takes dates as plain integers in YYYYMMDD form
(2025-05-21 -> 20250521). Local calendar fields are used as-is, no timezone
conversion happens here.
"""

from datetime import date, datetime, timedelta

from src.substitution.logging import get_logger

log = get_logger(__name__)


def encode_date(day: date) -> int:
    """Encode a calendar date as the service's YYYYMMDD integer."""
    return day.year * 10000 + day.month * 100 + day.day


def apply_offset(base: date, offset_days: int) -> date:
    """Shift ``base`` by ``offset_days`` (may be negative), rolling over months and years."""
    if isinstance(base, datetime):
        base = base.date()
    return base + timedelta(days=offset_days)


def parse_date_input(raw: str, *, today: date | None = None) -> date:
    """Parse a user-typed ``YYYY-MM-DD`` date, falling back to today.

    Blank input means today. Input that isn't three dash-separated numbers, or
    names a day that doesn't exist (2025-02-30), is logged and also falls back
    to today rather than failing the query.
    """
    today = today or date.today()
    text = raw.strip()
    if not text:
        return today

    parts = text.split("-")
    if len(parts) != 3:
        log.warning("date_input_invalid_format", raw=text, fallback=today.isoformat())
        return today

    try:
        year, month, day = (int(p) for p in parts)
        return date(year, month, day)
    except ValueError:
        log.warning("date_input_invalid_date", raw=text, fallback=today.isoformat())
        return today
