from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from ..badges.rules import attendance_rate, is_recent_joiner, resolve_badge
from ..common.datetime_utils import today_local
from ..core.constants import (
    FOLLOWUP_ATTENDANCE_RATE,
    FOLLOWUP_WINDOW_DAYS,
    LONG_ABSENT_DAYS,
    LOW_ATTENDANCE_RATE,
)
from ..core.enums import Badge
from ..dates.mapping import sundays_in_month
from ..dates.model import MonthId
from ..members.model import Member
from ..members.service import MemberService


@dataclass(frozen=True)
class OutreachEntry:
    member_id: int
    name: str
    phone: str
    attendance_rate: int
    days_since_join: Optional[int]
    reason: str

    def as_dict(self) -> Dict[str, object]:
        return {
            "id": self.member_id,
            "name": self.name,
            "phone": self.phone,
            "attendance_rate": self.attendance_rate,
            "days_since_join": self.days_since_join,
            "reason": self.reason,
        }


@dataclass(frozen=True)
class OutreachReport:
    month: str
    low_attendance: List[OutreachEntry] = field(default_factory=list)
    long_absent: List[OutreachEntry] = field(default_factory=list)
    newcomers_needing_followup: List[OutreachEntry] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "month": self.month,
            "low_attendance": [e.as_dict() for e in self.low_attendance],
            "long_absent": [e.as_dict() for e in self.long_absent],
            "newcomers_needing_followup": [e.as_dict() for e in self.newcomers_needing_followup],
        }


@dataclass(frozen=True)
class LevelSummary:
    level: str
    total_members: int
    average_attendance: int


class AnalyticsService:
    """Read-only statistics for the dashboard and pastoral follow-up."""

    def __init__(self, members: MemberService):
        self._members = members

    def _rates(self, month: MonthId) -> List[tuple[Member, int]]:
        sundays = sundays_in_month(month.name, month.year)
        return [(m, attendance_rate(m.statuses_for(sundays))) for m in self._members.list_members(month)]

    def badge_distribution(self, month: MonthId) -> Dict[Badge, List[int]]:
        sundays = sundays_in_month(month.name, month.year)
        out: Dict[Badge, List[int]] = {}
        for member in self._members.list_members(month):
            badge = resolve_badge(member.badge_override, member.badge, member.statuses_for(sundays))
            out.setdefault(badge, []).append(member.member_id)
        return out

    def outreach(self, month: MonthId, *, today: Optional[date] = None) -> OutreachReport:
        today = today or today_local()
        report = OutreachReport(month=month.table_name)

        for member, rate in self._rates(month):
            days = (today - member.join_date).days if member.join_date else None
            phone = member.phone or member.parent_phone or "No phone number"

            def entry(reason: str) -> OutreachEntry:
                return OutreachEntry(
                    member_id=member.member_id,
                    name=member.full_name,
                    phone=phone,
                    attendance_rate=rate,
                    days_since_join=days,
                    reason=reason,
                )

            if 0 < rate < LOW_ATTENDANCE_RATE:
                report.low_attendance.append(entry("Low attendance rate"))
            if rate == 0 and days is not None and days > LONG_ABSENT_DAYS:
                report.long_absent.append(entry("No recent attendance"))
            if days is not None and days <= FOLLOWUP_WINDOW_DAYS and rate < FOLLOWUP_ATTENDANCE_RATE:
                report.newcomers_needing_followup.append(entry("New member with low attendance"))

        return report

    def level_summary(self, month: MonthId) -> List[LevelSummary]:
        groups: Dict[str, List[int]] = {}
        for member, rate in self._rates(month):
            groups.setdefault(member.level or "Unknown", []).append(rate)
        return [
            LevelSummary(level=level, total_members=len(rates), average_attendance=round(sum(rates) / len(rates)))
            for level, rates in sorted(groups.items())
        ]

    def recent_joiners(self, month: MonthId, *, today: Optional[date] = None) -> List[Member]:
        """Members who joined within the newcomer window, newest first."""
        today = today or today_local()
        joined = [m for m in self._members.list_members(month) if is_recent_joiner(m.join_date, today)]
        return sorted(joined, key=lambda m: m.join_date, reverse=True)
