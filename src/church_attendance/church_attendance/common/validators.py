from __future__ import annotations

from datetime import date
from typing import Iterable, List, Optional

from ..core.exceptions import ValidationError
from .datetime_utils import parse_iso_date


def require_non_empty(value: Optional[str], field_name: str) -> str:
    if value is not None and not isinstance(value, str):
        raise ValidationError(f"{field_name} must be text")
    if not value or not value.strip():
        raise ValidationError(f"{field_name} is required")
    return value.strip()


def require_int(value, field_name: str) -> int:
    # bool is an int subclass; true/false is never a valid id.
    if isinstance(value, bool):
        raise ValidationError(f"Invalid {field_name}: {value!r}")
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid {field_name}: {value!r}")


def require_ids(values: Optional[Iterable], field_name: str) -> List[int]:
    if values is None:
        return []
    if isinstance(values, (str, bytes, dict)):
        raise ValidationError(f"{field_name} must be a list of ids")
    return [require_int(v, field_name) for v in values]


def require_year(value) -> int:
    try:
        year = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"Invalid year: {value!r}")
    if not 1900 <= year <= 9999:
        raise ValidationError(f"Year out of range: {year}")
    return year


def require_date(value) -> date:
    if isinstance(value, date):
        return value
    try:
        return parse_iso_date(str(value or "").strip())
    except ValueError:
        raise ValidationError(f"Invalid date (YYYY-MM-DD): {value!r}")
