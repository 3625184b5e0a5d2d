"""Pure translation between calendar dates and attendance field names.

Every Sunday of a month is stored as its own column. The column name encodes
the full date (``attendance_2026_01_04``) so it can be decoded back without
ambiguity across months and years.
"""

from __future__ import annotations

import re
from datetime import date, timedelta
from typing import List, Optional

from ..core.constants import ATTENDANCE_FIELD_PREFIX
from .model import month_index

_FIELD_RE = re.compile(r"^" + re.escape(ATTENDANCE_FIELD_PREFIX) + r"(\d{4})_(\d{2})_(\d{2})$")

SUNDAY = 6  # date.weekday()


def sundays_in_month(month_name: str, year: int) -> List[date]:
    """All Sundays of the month in ascending order; [] for an unknown month name."""
    idx = month_index(month_name)
    if idx is None:
        return []
    try:
        day = date(int(year), idx, 1)
    except (TypeError, ValueError):
        return []

    day += timedelta(days=(SUNDAY - day.weekday()) % 7)
    out: List[date] = []
    while day.month == idx:
        out.append(day)
        day += timedelta(days=7)
    return out


def attendance_field_id(day: date) -> str:
    return f"{ATTENDANCE_FIELD_PREFIX}{day.year:04d}_{day.month:02d}_{day.day:02d}"


def decode_field_id(field_id: str) -> Optional[date]:
    """Inverse of attendance_field_id; None for non-attendance names."""
    m = _FIELD_RE.match(field_id or "")
    if not m:
        return None
    try:
        return date(int(m.group(1)), int(m.group(2)), int(m.group(3)))
    except ValueError:
        return None


def is_attendance_field(field_id: str) -> bool:
    return decode_field_id(field_id) is not None


def is_field_for_date(field_id: str, day: date) -> bool:
    return decode_field_id(field_id) == day
