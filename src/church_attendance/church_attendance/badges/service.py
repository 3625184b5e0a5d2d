from __future__ import annotations

import logging
import threading
from contextlib import contextmanager
from typing import Iterable, Iterator, List, Optional

from ..activity.service import ActivityService
from ..common.cache import TTLCache
from ..core.constants import REASON_ALREADY_REGULAR, REASON_NOT_CONSECUTIVE, REASON_OVERRIDE_RETAINED
from ..core.enums import ActivityAction, Badge
from ..core.exceptions import MonthIncompleteError, ProcessingInProgressError
from ..dates.mapping import sundays_in_month
from ..dates.model import MonthId
from ..members.model import Member
from ..members.repository import MemberRepository
from .model import BadgeReport, MemberOutcome
from .rules import badge_rank, compute_badge, has_three_consecutive_present, missing_sundays

logger = logging.getLogger(__name__)


def _qualified_reason(overridden: bool, assigned: bool) -> Optional[str]:
    if overridden:
        return REASON_OVERRIDE_RETAINED
    return None if assigned else REASON_ALREADY_REGULAR


class BadgeService:
    """Use case: derive and persist badges for a month's members."""

    def __init__(self, members: MemberRepository, activity: ActivityService, cache: TTLCache):
        self._members = members
        self._activity = activity
        self._cache = cache
        self._running: set[str] = set()
        self._lock = threading.Lock()

    @contextmanager
    def _guard(self, month: MonthId) -> Iterator[bool]:
        with self._lock:
            acquired = month.table_name not in self._running
            if acquired:
                self._running.add(month.table_name)
        try:
            yield acquired
        finally:
            if acquired:
                with self._lock:
                    self._running.discard(month.table_name)

    def _assign(self, month: MonthId, member: Member, badge: Badge) -> None:
        self._members.update_member(month, member.member_id, {"badge": badge})
        self._activity.record(
            ActivityAction.ASSIGN_BADGE,
            f"{member.full_name}: {member.badge.value} -> {badge.value}",
            month=month.table_name,
        )

    def process_month(self, month: MonthId) -> BadgeReport:
        """Upgrade every qualifying member and report the rest for outreach.

        Refuses to run on a partially recorded month, because members would be
        reported as non-qualifying before all Sundays are in.
        """
        with self._guard(month) as acquired:
            if not acquired:
                raise ProcessingInProgressError(f"Badge processing already running for {month.table_name}")

            sundays = sundays_in_month(month.name, month.year)
            members = list(self._members.list_members(month))
            missing = missing_sundays(sundays, {m.member_id: m.attendance for m in members})
            if missing:
                raise MonthIncompleteError(
                    f"{month.table_name} is not complete: no attendance for "
                    + ", ".join(d.isoformat() for d in missing),
                    missing_dates=missing,
                )

            qualified: List[MemberOutcome] = []
            not_qualified: List[MemberOutcome] = []
            try:
                for member in members:
                    statuses = member.statuses_for(sundays)
                    computed = compute_badge(None, statuses)
                    current = member.effective_badge
                    overridden = member.badge_override is not None
                    needs_upgrade = not overridden and badge_rank(computed) > badge_rank(member.badge)
                    if needs_upgrade:
                        self._assign(month, member, computed)

                    if has_three_consecutive_present(statuses):
                        qualified.append(
                            MemberOutcome(
                                member_id=member.member_id,
                                name=member.full_name,
                                phone=member.phone,
                                current_badge=current,
                                computed_badge=computed,
                                badge_assigned=needs_upgrade,
                                assigned_badge=computed if needs_upgrade else None,
                                reason=_qualified_reason(overridden, needs_upgrade),
                            )
                        )
                    else:
                        not_qualified.append(
                            MemberOutcome(
                                member_id=member.member_id,
                                name=member.full_name,
                                phone=member.phone,
                                current_badge=current,
                                computed_badge=computed,
                                badge_assigned=needs_upgrade,
                                assigned_badge=computed if needs_upgrade else None,
                                reason=REASON_NOT_CONSECUTIVE,
                            )
                        )
            finally:
                self._cache.invalidate(month.table_name)

            report = BadgeReport(
                month=month.table_name,
                qualified=qualified,
                not_qualified=not_qualified,
                total_processed=len(members),
            )
            logger.info(
                "processed badges for %s: %d qualified, %d assigned",
                month.table_name,
                len(qualified),
                report.assigned_count,
            )
            return report

    def refresh_badges(self, month: MonthId, member_ids: Optional[Iterable[int]] = None) -> List[int]:
        """Raise cached badges to what the month's attendance supports.

        Badges carried over from earlier months are never lowered here.
        Members holding a manual override are left alone.
        A reentrant call for the same month returns immediately.
        """
        wanted = {int(i) for i in member_ids} if member_ids is not None else None
        with self._guard(month) as acquired:
            if not acquired:
                logger.debug("badge refresh for %s skipped: already running", month.table_name)
                return []

            sundays = sundays_in_month(month.name, month.year)
            changed: List[int] = []
            try:
                for member in self._members.list_members(month):
                    if wanted is not None and member.member_id not in wanted:
                        continue
                    if member.badge_override is not None:
                        continue
                    computed = compute_badge(None, member.statuses_for(sundays))
                    if badge_rank(computed) > badge_rank(member.badge):
                        self._assign(month, member, computed)
                        changed.append(member.member_id)
            finally:
                if changed:
                    self._cache.invalidate(month.table_name)
            return changed
