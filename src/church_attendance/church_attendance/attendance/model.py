from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Tuple

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class BulkResult:
    day: date
    status: AttendanceStatus
    succeeded_ids: Tuple[int, ...] = ()


@dataclass(frozen=True)
class SundaySummary:
    day: date
    field_exists: bool
    present: int
    absent: int

    @property
    def recorded(self) -> int:
        return self.present + self.absent


@dataclass(frozen=True)
class MonthOverview:
    """Read-model for the month dashboard."""

    month: str
    sundays: List[SundaySummary] = field(default_factory=list)
    total_members: int = 0
    is_complete: bool = False

    def as_dict(self) -> Dict[str, object]:
        return {
            "month": self.month,
            "total_members": self.total_members,
            "is_complete": self.is_complete,
            "sundays": [
                {
                    "date": s.day.isoformat(),
                    "field_exists": s.field_exists,
                    "present": s.present,
                    "absent": s.absent,
                }
                for s in self.sundays
            ],
        }
