from __future__ import annotations

from enum import Enum
from typing import Optional


class AttendanceStatus(str, Enum):
    """Tri-state value stored per (member, Sunday)."""

    PRESENT = "present"
    ABSENT = "absent"
    UNSET = "unset"

    @classmethod
    def from_stored(cls, value) -> "AttendanceStatus":
        # Attendance fields hold 1 / 0 / NULL; legacy rows may hold the labels.
        if value is None or value == "":
            return cls.UNSET
        if isinstance(value, str):
            v = value.strip().lower()
            if v in {"present", "1", "true"}:
                return cls.PRESENT
            if v in {"absent", "0", "false"}:
                return cls.ABSENT
            return cls.UNSET
        return cls.PRESENT if bool(value) else cls.ABSENT

    def to_stored(self) -> Optional[bool]:
        if self is AttendanceStatus.PRESENT:
            return True
        if self is AttendanceStatus.ABSENT:
            return False
        return None


class Badge(str, Enum):
    """Member category. VIP is only ever assigned manually."""

    NEWCOMER = "newcomer"
    MEMBER = "member"
    REGULAR = "regular"
    VIP = "vip"


class CopyMode(str, Enum):
    """Which members a new month is seeded with."""

    ALL = "all"
    CUSTOM = "custom"
    EMPTY = "empty"


class MonthState(str, Enum):
    NONEXISTENT = "nonexistent"
    PROVISIONING = "provisioning"
    READY = "ready"


class ActivityAction(str, Enum):
    ADD_MEMBER = "ADD_MEMBER"
    UPDATE_MEMBER = "UPDATE_MEMBER"
    DELETE_MEMBER = "DELETE_MEMBER"
    MARK_ATTENDANCE = "MARK_ATTENDANCE"
    BULK_ATTENDANCE = "BULK_ATTENDANCE"
    CREATE_MONTH = "CREATE_MONTH"
    ASSIGN_BADGE = "ASSIGN_BADGE"
