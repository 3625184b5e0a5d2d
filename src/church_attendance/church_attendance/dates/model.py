from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Tuple

from ..core.constants import MONTH_NAMES
from ..core.exceptions import ValidationError


def month_index(name: Optional[str]) -> Optional[int]:
    """1-based calendar index for an English month name, or None."""
    if not name:
        return None
    wanted = name.strip().lower()
    for idx, candidate in enumerate(MONTH_NAMES, start=1):
        if candidate.lower() == wanted:
            return idx
    return None


@dataclass(frozen=True)
class MonthId:
    """A workspace period such as ``January_2026``."""

    name: str
    year: int

    @classmethod
    def of(cls, name: str, year: int) -> "MonthId":
        idx = month_index(name)
        if idx is None:
            raise ValidationError(f"Unknown month name: {name!r}")
        return cls(name=MONTH_NAMES[idx - 1], year=int(year))

    @classmethod
    def parse(cls, table_name: str) -> "MonthId":
        name, sep, year = (table_name or "").partition("_")
        if not sep or not year.isdigit():
            raise ValidationError(f"Invalid month identifier: {table_name!r}")
        return cls.of(name, int(year))

    @classmethod
    def for_date(cls, day: date) -> "MonthId":
        return cls(name=MONTH_NAMES[day.month - 1], year=day.year)

    @property
    def index(self) -> int:
        idx = month_index(self.name)
        if idx is None:
            raise ValidationError(f"Unknown month name: {self.name!r}")
        return idx

    @property
    def table_name(self) -> str:
        return f"{self.name}_{self.year}"

    @property
    def sort_key(self) -> Tuple[int, int]:
        return (self.year, self.index)

    def contains(self, day: date) -> bool:
        return day.year == self.year and day.month == self.index

    def __str__(self) -> str:
        return self.table_name
