"""Date manipulation utilities"""

from datetime import date, datetime
from typing import Any, Optional, Tuple


def parse_iso_date(value: Any) -> Optional[date]:
    """Parse a date, datetime or ISO-8601 string into a date (None if unparseable)"""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        return None


def add_months(year: int, month: int, delta: int) -> Tuple[int, int]:
    """Shift a (year, month) pair by delta months, wrapping across years"""
    index = year * 12 + (month - 1) + delta
    return index // 12, index % 12 + 1
