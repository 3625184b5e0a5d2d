from __future__ import annotations

from typing import Any, Dict

from ..activity.model import ActivityEntry
from ..core.exceptions import ValidationError
from ..members.model import Member


def member_to_json(member: Member) -> Dict[str, Any]:
    return {
        "id": member.member_id,
        "full_name": member.full_name,
        "gender": member.gender,
        "phone": member.phone,
        "age": member.age,
        "level": member.level,
        "parent_name": member.parent_name,
        "parent_phone": member.parent_phone,
        "ministries": list(member.ministries),
        "is_visitor": member.is_visitor,
        "join_date": member.join_date.isoformat() if member.join_date else None,
        "badge": member.badge.value,
        "badge_override": member.badge_override.value if member.badge_override else None,
        "effective_badge": member.effective_badge.value,
        "attendance": {d.isoformat(): s.value for d, s in sorted(member.attendance.items())},
    }


def activity_to_json(entry: ActivityEntry) -> Dict[str, Any]:
    return {
        "id": entry.entry_id,
        "action": entry.action.value,
        "details": entry.details,
        "month": entry.month,
        "created_at": entry.created_at.isoformat() if entry.created_at else None,
    }


def require_json_object(payload: Any) -> Dict[str, Any]:
    if not isinstance(payload, dict):
        raise ValidationError("Expected a JSON object body")
    return payload
