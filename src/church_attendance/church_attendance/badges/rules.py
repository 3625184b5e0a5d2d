"""Badge rules.

One rule set is applied everywhere:

* ``regular``  - present on 3 consecutive Sundays of the month
* ``member``   - present on 2 or more Sundays (not necessarily consecutive)
* ``newcomer`` - everything else, including members who joined recently

A manual override always wins. ``absent`` and ``unset`` both break a streak.
"""

from __future__ import annotations

from datetime import date, timedelta
from typing import Iterable, Mapping, Optional, Sequence

from ..core.constants import MEMBER_MIN_PRESENT, NEWCOMER_WINDOW_DAYS, REGULAR_STREAK
from ..core.enums import AttendanceStatus, Badge

_RANK = {
    Badge.NEWCOMER: 0,
    Badge.MEMBER: 1,
    Badge.REGULAR: 2,
    Badge.VIP: 3,
}


def badge_rank(badge: Optional[Badge]) -> int:
    return _RANK.get(badge, -1) if badge is not None else -1


def has_three_consecutive_present(statuses: Iterable[AttendanceStatus]) -> bool:
    """Statuses must be ordered by Sunday, ascending."""
    streak = 0
    for status in statuses:
        if status is AttendanceStatus.PRESENT:
            streak += 1
            if streak >= REGULAR_STREAK:
                return True
        else:
            streak = 0
    return False


def count_present(statuses: Iterable[AttendanceStatus]) -> int:
    return sum(1 for s in statuses if s is AttendanceStatus.PRESENT)


def attendance_rate(statuses: Sequence[AttendanceStatus]) -> int:
    """Percentage of Sundays present, rounded; 0 for an empty month."""
    if not statuses:
        return 0
    return round(100 * count_present(statuses) / len(statuses))


def is_recent_joiner(join_date: Optional[date], today: date) -> bool:
    if join_date is None:
        return False
    return today - join_date <= timedelta(days=NEWCOMER_WINDOW_DAYS)


def compute_badge(override: Optional[Badge], statuses: Sequence[AttendanceStatus]) -> Badge:
    if override is not None:
        return override
    if has_three_consecutive_present(statuses):
        return Badge.REGULAR
    if count_present(statuses) >= MEMBER_MIN_PRESENT:
        return Badge.MEMBER
    return Badge.NEWCOMER


def resolve_badge(
    override: Optional[Badge],
    stored: Optional[Badge],
    statuses: Sequence[AttendanceStatus],
) -> Badge:
    """Badge a member holds: the override, else the higher of stored and computed.

    Stored badges carry earlier months, so they only ever raise the result.
    """
    if override is not None:
        return override
    computed = compute_badge(None, statuses)
    return stored if badge_rank(stored) > badge_rank(computed) else computed


def missing_sundays(
    sundays: Sequence[date],
    attendance_by_member: Mapping[int, Mapping[date, AttendanceStatus]],
) -> list[date]:
    """Sundays that no member has a present/absent value for."""
    touched = {
        day
        for per_member in attendance_by_member.values()
        for day, status in per_member.items()
        if status is not AttendanceStatus.UNSET
    }
    return [d for d in sundays if d not in touched]


def is_month_complete(
    sundays: Sequence[date],
    attendance_by_member: Mapping[int, Mapping[date, AttendanceStatus]],
) -> bool:
    """True iff each Sunday has at least one recorded entry from any member.

    Note: this does not require every member to have a value for every date.
    """
    return not missing_sundays(sundays, attendance_by_member)
