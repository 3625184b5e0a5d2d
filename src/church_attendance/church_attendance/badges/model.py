from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from ..core.enums import Badge


@dataclass(frozen=True)
class MemberOutcome:
    """One member's line in the badge processing report (also used for outreach)."""

    member_id: int
    name: str
    phone: Optional[str]
    current_badge: Badge
    computed_badge: Badge
    badge_assigned: bool = False
    assigned_badge: Optional[Badge] = None
    reason: Optional[str] = None

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.member_id,
            "name": self.name,
            "phone": self.phone or "No phone",
            "current_badge": self.current_badge.value,
            "computed_badge": self.computed_badge.value,
            "badge_assigned": self.badge_assigned,
            "assigned_badge": self.assigned_badge.value if self.assigned_badge else None,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class BadgeReport:
    month: str
    qualified: List[MemberOutcome] = field(default_factory=list)
    not_qualified: List[MemberOutcome] = field(default_factory=list)
    total_processed: int = 0

    @property
    def assigned_count(self) -> int:
        return sum(1 for o in self.qualified + self.not_qualified if o.badge_assigned)

    def as_dict(self) -> Dict[str, object]:
        return {
            "month": self.month,
            "qualified": [o.as_dict() for o in self.qualified],
            "not_qualified": [o.as_dict() for o in self.not_qualified],
            "total_processed": self.total_processed,
            "assigned_count": self.assigned_count,
        }
