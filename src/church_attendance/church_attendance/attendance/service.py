from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List

from ..activity.service import ActivityService
from ..badges.rules import is_month_complete
from ..badges.service import BadgeService
from ..core.enums import ActivityAction, AttendanceStatus
from ..common.validators import require_ids, require_int
from ..core.exceptions import PartialFailure, ValidationError
from ..dates.mapping import sundays_in_month
from ..dates.model import MonthId
from .model import BulkResult, MonthOverview, SundaySummary
from .store_adapter import AttendanceStoreAdapter

logger = logging.getLogger(__name__)


class AttendanceService:
    """Use case: record Sunday attendance and keep cached badges in step."""

    def __init__(self, adapter: AttendanceStoreAdapter, badges: BadgeService, activity: ActivityService):
        self._adapter = adapter
        self._badges = badges
        self._activity = activity

    @staticmethod
    def parse_status(value) -> AttendanceStatus:
        if isinstance(value, AttendanceStatus):
            return value
        if isinstance(value, bool):
            return AttendanceStatus.PRESENT if value else AttendanceStatus.ABSENT
        if value is None:
            return AttendanceStatus.UNSET
        try:
            return AttendanceStatus(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown attendance status: {value!r}")

    @staticmethod
    def _require_sunday(month: MonthId, day: date) -> None:
        if day not in sundays_in_month(month.name, month.year):
            raise ValidationError(f"{day.isoformat()} is not a Sunday in {month.table_name}")

    def get_attendance(self, month: MonthId, member_id: int, day: date) -> AttendanceStatus:
        return self._adapter.get_attendance(month, member_id, day)

    def attendance_for_date(self, month: MonthId, day: date) -> Dict[int, AttendanceStatus]:
        return self._adapter.list_attendance_for_date(month, day)

    def mark_attendance(self, month: MonthId, member_id: int, day: date, status) -> AttendanceStatus:
        status = self.parse_status(status)
        self._require_sunday(month, day)
        member_id = require_int(member_id, "member id")

        self._adapter.set_attendance(month, member_id, day, status)
        self._activity.record(
            ActivityAction.MARK_ATTENDANCE,
            f"member {member_id} {status.value} on {day.isoformat()}",
            month=month.table_name,
        )
        self._badges.refresh_badges(month, [member_id])
        return status

    def bulk_mark_attendance(self, month: MonthId, member_ids: Iterable[int], day: date, status) -> BulkResult:
        status = self.parse_status(status)
        self._require_sunday(month, day)
        ids = require_ids(member_ids, "member id")
        if not ids:
            raise ValidationError("No members selected")

        try:
            result = self._adapter.bulk_set_attendance(month, ids, day, status)
            succeeded: List[int] = list(result.succeeded_ids)
        except PartialFailure as e:
            logger.warning(
                "bulk attendance for %s on %s: %d failed (%s)",
                month.table_name,
                day.isoformat(),
                len(e.failed_ids),
                ", ".join(str(i) for i in e.failed_ids),
            )
            succeeded = e.succeeded_ids
            self._after_bulk(month, day, status, succeeded)
            raise
        self._after_bulk(month, day, status, succeeded)
        return result

    def _after_bulk(self, month: MonthId, day: date, status: AttendanceStatus, succeeded: List[int]) -> None:
        if not succeeded:
            return
        self._activity.record(
            ActivityAction.BULK_ATTENDANCE,
            f"{len(succeeded)} members {status.value} on {day.isoformat()}",
            month=month.table_name,
        )
        self._badges.refresh_badges(month, succeeded)

    def month_overview(self, month: MonthId) -> MonthOverview:
        sundays = sundays_in_month(month.name, month.year)
        matrix = self._adapter.attendance_matrix(month)
        existing = set(self._adapter.field_dates(month))

        summaries = []
        for day in sundays:
            values = [per_member.get(day, AttendanceStatus.UNSET) for per_member in matrix.values()]
            summaries.append(
                SundaySummary(
                    day=day,
                    field_exists=day in existing,
                    present=sum(1 for v in values if v is AttendanceStatus.PRESENT),
                    absent=sum(1 for v in values if v is AttendanceStatus.ABSENT),
                )
            )

        return MonthOverview(
            month=month.table_name,
            sundays=summaries,
            total_members=len(matrix),
            is_complete=is_month_complete(sundays, matrix),
        )
