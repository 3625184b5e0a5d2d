from __future__ import annotations

from datetime import date, datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..core.enums import AttendanceStatus, Badge
from ..core.exceptions import ValidationError
from ..database.store import RecordStore, Row
from ..dates.mapping import decode_field_id
from ..dates.model import MonthId
from .model import Member, NewMember
from .repository import MemberRepository


def _as_date(value: Any) -> Optional[date]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], "%Y-%m-%d").date()
    except ValueError:
        return None


def _as_badge(value: Any) -> Optional[Badge]:
    if not value:
        return None
    if isinstance(value, Badge):
        return value
    try:
        return Badge(str(value).strip().lower())
    except ValueError:
        return None


def _as_ministries(value: Any) -> tuple:
    if not value:
        return ()
    if isinstance(value, str):
        return tuple(t.strip() for t in value.split(",") if t.strip())
    return tuple(str(t).strip() for t in value if str(t).strip())


def _opt_str(value: Any) -> Optional[str]:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def row_to_member(row: Row) -> Member:
    attendance: Dict[date, AttendanceStatus] = {}
    for key, value in row.items():
        day = decode_field_id(key)
        if day is not None:
            attendance[day] = AttendanceStatus.from_stored(value)

    return Member(
        member_id=int(row["id"]),
        full_name=str(row.get("full_name") or ""),
        gender=str(row.get("gender") or ""),
        phone=_opt_str(row.get("phone")),
        age=_opt_str(row.get("age")),
        level=_opt_str(row.get("level")),
        parent_name=_opt_str(row.get("parent_name")),
        parent_phone=_opt_str(row.get("parent_phone")),
        ministries=_as_ministries(row.get("ministries")),
        is_visitor=bool(row.get("is_visitor")),
        join_date=_as_date(row.get("join_date")),
        badge=_as_badge(row.get("badge")) or Badge.NEWCOMER,
        badge_override=_as_badge(row.get("badge_override")),
        attendance=attendance,
    )


def to_store_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list, set, frozenset)):
        return ",".join(str(v) for v in value)
    if isinstance(value, bool):
        return 1 if value else 0
    return value


def member_to_row(member: Member) -> Row:
    """Descriptive fields only; used when carrying a member into another month."""
    return {
        "full_name": member.full_name,
        "gender": member.gender,
        "phone": member.phone,
        "age": member.age,
        "level": member.level,
        "parent_name": member.parent_name,
        "parent_phone": member.parent_phone,
        "ministries": to_store_value(member.ministries),
        "is_visitor": to_store_value(member.is_visitor),
        "join_date": member.join_date,
        "badge": member.badge.value,
        "badge_override": member.badge_override.value if member.badge_override else None,
    }


def new_member_to_row(data: NewMember) -> Row:
    return {
        "full_name": data.full_name,
        "gender": data.gender,
        "phone": data.phone,
        "age": data.age,
        "level": data.level,
        "parent_name": data.parent_name,
        "parent_phone": data.parent_phone,
        "ministries": to_store_value(data.ministries),
        "is_visitor": to_store_value(data.is_visitor),
        "join_date": data.join_date,
        "badge": Badge.NEWCOMER.value,
        "badge_override": data.badge_override.value if data.badge_override else None,
    }


class StoreMemberRepository(MemberRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def list_members(self, month: MonthId) -> List[Member]:
        return [row_to_member(r) for r in self._store.query(month.table_name)]

    def get_member(self, month: MonthId, member_id: int) -> Optional[Member]:
        rows = self._store.query(month.table_name, {"id": int(member_id)})
        return row_to_member(rows[0]) if rows else None

    def insert_members(self, month: MonthId, rows: Sequence[Mapping[str, Any]]) -> List[Member]:
        prepared = [{k: to_store_value(v) for k, v in r.items()} for r in rows]
        return [row_to_member(r) for r in self._store.insert(month.table_name, prepared)]

    def update_member(self, month: MonthId, member_id: int, fields: Mapping[str, Any]) -> Optional[Member]:
        writable = {c.name for c in self._store.list_columns(month.table_name)} - {"id", "inserted_at"}
        unknown = sorted(k for k in fields if k not in writable)
        if unknown:
            raise ValidationError(f"Unknown or read-only member field(s): {', '.join(unknown)}")

        row = self._store.update(month.table_name, int(member_id), {k: to_store_value(v) for k, v in fields.items()})
        return row_to_member(row) if row else None

    def delete_member(self, month: MonthId, member_id: int) -> bool:
        return self._store.delete(month.table_name, int(member_id))

