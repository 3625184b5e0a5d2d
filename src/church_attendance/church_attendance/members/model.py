from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional, Sequence, Tuple

from ..core.enums import AttendanceStatus, Badge


@dataclass(frozen=True)
class Member:
    """A member row of one month table, attendance included."""

    member_id: int
    full_name: str
    gender: str
    phone: Optional[str] = None
    age: Optional[str] = None
    level: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    ministries: Tuple[str, ...] = ()
    is_visitor: bool = False
    join_date: Optional[date] = None
    badge: Badge = Badge.NEWCOMER
    badge_override: Optional[Badge] = None
    attendance: Dict[date, AttendanceStatus] = field(default_factory=dict, compare=False)

    @property
    def effective_badge(self) -> Badge:
        return self.badge_override or self.badge

    def status_on(self, day: date) -> AttendanceStatus:
        return self.attendance.get(day, AttendanceStatus.UNSET)

    def statuses_for(self, sundays: Sequence[date]) -> List[AttendanceStatus]:
        """Statuses in the order of ``sundays``; dates without a field count as unset."""
        return [self.status_on(d) for d in sundays]


@dataclass(frozen=True)
class NewMember:
    """Input for adding a member to a month."""

    full_name: str
    gender: str
    phone: Optional[str] = None
    age: Optional[str] = None
    level: Optional[str] = None
    parent_name: Optional[str] = None
    parent_phone: Optional[str] = None
    ministries: Tuple[str, ...] = ()
    is_visitor: bool = False
    join_date: Optional[date] = None
    badge_override: Optional[Badge] = None
