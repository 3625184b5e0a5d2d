from __future__ import annotations

from typing import Any, List, Mapping, Optional

from ..activity.service import ActivityService
from ..common.cache import TTLCache
from ..common.validators import require_non_empty
from ..core.enums import ActivityAction, Badge
from ..core.exceptions import NotFoundError, ValidationError
from ..dates.mapping import is_attendance_field
from ..dates.model import MonthId
from .model import Member, NewMember
from .repository import MemberRepository
from .store_member_repository import new_member_to_row


class MemberService:
    """Use case: manage the members of a month."""

    def __init__(self, members: MemberRepository, activity: ActivityService, cache: TTLCache):
        self._members = members
        self._activity = activity
        self._cache = cache

    def list_members(self, month: MonthId) -> List[Member]:
        return self._cache.get_or_load(
            (month.table_name, "members"),
            lambda: list(self._members.list_members(month)),
        )

    def get_member(self, month: MonthId, member_id: int) -> Member:
        member = self._members.get_member(month, int(member_id))
        if not member:
            raise NotFoundError(f"Member {member_id} not found in {month.table_name}")
        return member

    def search(self, month: MonthId, term: str) -> List[Member]:
        needle = (term or "").strip().lower()
        members = self.list_members(month)
        if not needle:
            return members
        return [m for m in members if needle in m.full_name.lower()]

    def add_member(self, month: MonthId, data: NewMember) -> Member:
        row = new_member_to_row(data)
        row["full_name"] = require_non_empty(data.full_name, "Full name")
        row["gender"] = require_non_empty(data.gender, "Gender")

        try:
            created = self._members.insert_members(month, [row])[0]
        finally:
            self._cache.invalidate(month.table_name)
        self._activity.record(ActivityAction.ADD_MEMBER, created.full_name, month=month.table_name)
        return created

    def update_member(self, month: MonthId, member_id: int, updates: Mapping[str, Any]) -> Member:
        updates = dict(updates)
        if not updates:
            raise ValidationError("Nothing to update")
        if any(is_attendance_field(k) for k in updates):
            raise ValidationError("Attendance is recorded per Sunday, not through member updates")
        if "full_name" in updates:
            updates["full_name"] = require_non_empty(updates["full_name"], "Full name")
        if "badge" in updates:
            updates["badge"] = self._parse_badge(updates["badge"])
        if "badge_override" in updates and updates["badge_override"] is not None:
            updates["badge_override"] = self._parse_badge(updates["badge_override"])

        try:
            member = self._members.update_member(month, int(member_id), updates)
        finally:
            self._cache.invalidate(month.table_name)
        if not member:
            raise NotFoundError(f"Member {member_id} not found in {month.table_name}")

        self._activity.record(
            ActivityAction.UPDATE_MEMBER,
            f"{member.full_name}: {', '.join(sorted(updates))}",
            month=month.table_name,
        )
        return member

    def set_badge_override(self, month: MonthId, member_id: int, badge: Optional[Badge | str]) -> Member:
        return self.update_member(month, member_id, {"badge_override": badge})

    def delete_member(self, month: MonthId, member_id: int) -> None:
        member = self.get_member(month, member_id)
        try:
            deleted = self._members.delete_member(month, int(member_id))
        finally:
            self._cache.invalidate(month.table_name)
        if not deleted:
            raise NotFoundError(f"Member {member_id} not found in {month.table_name}")
        self._activity.record(ActivityAction.DELETE_MEMBER, member.full_name, month=month.table_name)

    @staticmethod
    def _parse_badge(value: Any) -> Badge:
        if isinstance(value, Badge):
            return value
        try:
            return Badge(str(value).strip().lower())
        except ValueError:
            raise ValidationError(f"Unknown badge: {value!r}")
