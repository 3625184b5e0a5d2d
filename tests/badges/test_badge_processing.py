from __future__ import annotations

import pytest

from church_attendance.core.constants import REASON_ALREADY_REGULAR, REASON_NOT_CONSECUTIVE, REASON_OVERRIDE_RETAINED
from church_attendance.core.enums import AttendanceStatus, Badge
from church_attendance.core.exceptions import MonthIncompleteError, ProcessingInProgressError

P = AttendanceStatus.PRESENT
A = AttendanceStatus.ABSENT
U = AttendanceStatus.UNSET


@pytest.fixture
def record(container, march, march_sundays):
    """Write a row of statuses straight through the adapter (no badge refresh)."""

    def _record(member_id, statuses):
        for day, status in zip(march_sundays, statuses):
            container.attendance_adapter.set_attendance(march, member_id, day, status)

    return _record


def test_process_month_upgrades_and_reports(container, march, add_members, record):
    a, b, c = add_members(march, "Ann", "Ben", "Cleo")
    container.member_service.update_member(march, c.member_id, {"badge": "member"})
    record(a.member_id, [P, P, P, A, U])
    record(b.member_id, [A, A, P, P, P])
    record(c.member_id, [P, A, P, A, P])

    report = container.badge_service.process_month(march)

    assert [o.member_id for o in report.qualified] == [a.member_id, b.member_id]
    assert all(o.badge_assigned and o.assigned_badge is Badge.REGULAR for o in report.qualified)

    (cleo,) = report.not_qualified
    assert cleo.member_id == c.member_id
    assert cleo.computed_badge is Badge.MEMBER
    assert cleo.badge_assigned is False
    assert cleo.reason == REASON_NOT_CONSECUTIVE

    assert report.total_processed == 3
    assert report.assigned_count == 2
    members = {m.member_id: m for m in container.member_service.list_members(march)}
    assert members[a.member_id].badge is Badge.REGULAR
    assert members[b.member_id].badge is Badge.REGULAR
    assert members[c.member_id].badge is Badge.MEMBER


def test_process_month_refuses_incomplete_month(container, march, add_members, record, march_sundays):
    (a,) = add_members(march, "Ann")
    record(a.member_id, [P, P, P, U, U])

    with pytest.raises(MonthIncompleteError) as exc_info:
        container.badge_service.process_month(march)

    assert exc_info.value.missing_dates == march_sundays[3:]
    assert container.member_service.get_member(march, a.member_id).badge is Badge.NEWCOMER


def test_already_regular_is_qualified_but_not_reassigned(container, march, add_members, record):
    (a,) = add_members(march, "Ann")
    container.member_service.update_member(march, a.member_id, {"badge": "regular"})
    record(a.member_id, [P, P, P, P, P])

    (outcome,) = container.badge_service.process_month(march).qualified

    assert outcome.badge_assigned is False
    assert outcome.reason == REASON_ALREADY_REGULAR


def test_manual_override_is_never_replaced(container, march, add_members, record):
    (a,) = add_members(march, "Ann")
    container.member_service.set_badge_override(march, a.member_id, "vip")
    record(a.member_id, [P, P, P, A, A])

    report = container.badge_service.process_month(march)

    assert report.qualified[0].badge_assigned is False
    assert report.qualified[0].reason == REASON_OVERRIDE_RETAINED
    member = container.member_service.get_member(march, a.member_id)
    assert member.effective_badge is Badge.VIP
    assert member.badge is Badge.NEWCOMER


def test_lower_override_is_retained_without_assignment(container, march, add_members, record):
    (a,) = add_members(march, "Ann")
    container.member_service.set_badge_override(march, a.member_id, Badge.MEMBER)
    record(a.member_id, [P, P, P, A, A])

    report = container.badge_service.process_month(march)

    (outcome,) = report.qualified
    assert outcome.current_badge is Badge.MEMBER
    assert outcome.computed_badge is Badge.REGULAR
    assert outcome.badge_assigned is False
    assert outcome.assigned_badge is None
    assert outcome.reason == REASON_OVERRIDE_RETAINED
    assert report.assigned_count == 0
    member = container.member_service.get_member(march, a.member_id)
    assert member.badge is Badge.NEWCOMER
    assert member.effective_badge is Badge.MEMBER


def test_non_qualifier_with_two_sundays_becomes_member(container, march, add_members, record):
    (a,) = add_members(march, "Ann")
    record(a.member_id, [P, A, A, P, A])

    (outcome,) = container.badge_service.process_month(march).not_qualified

    assert outcome.badge_assigned is True
    assert outcome.assigned_badge is Badge.MEMBER
    assert outcome.reason == REASON_NOT_CONSECUTIVE


def test_process_month_is_exclusive_per_month(container, march, add_members, record):
    (a,) = add_members(march, "Ann")
    record(a.member_id, [P, P, P, P, P])

    with container.badge_service._guard(march):
        with pytest.raises(ProcessingInProgressError):
            container.badge_service.process_month(march)
        assert container.badge_service.refresh_badges(march) == []

    assert container.badge_service.process_month(march).assigned_count == 1


def test_refresh_badges_only_raises(container, march, add_members, record):
    a, b = add_members(march, "Ann", "Ben")
    container.member_service.update_member(march, b.member_id, {"badge": "regular"})
    record(a.member_id, [P, A, P, U, U])
    record(b.member_id, [A, A, U, U, U])

    changed = container.badge_service.refresh_badges(march)

    assert changed == [a.member_id]
    assert container.member_service.get_member(march, b.member_id).badge is Badge.REGULAR


def test_report_as_dict(container, march, add_members, record):
    (a,) = add_members(march, "Ann", phone="555-0101")
    record(a.member_id, [P, P, P, P, P])

    payload = container.badge_service.process_month(march).as_dict()

    assert payload["month"] == "March_2026"
    assert payload["qualified"][0]["phone"] == "555-0101"
    assert payload["qualified"][0]["assigned_badge"] == "regular"
    assert payload["not_qualified"] == []


def test_refresh_badges_skips_override_holders(container, march, add_members, record):
    a, b = add_members(march, "Ann", "Ben")
    container.member_service.set_badge_override(march, a.member_id, "member")
    record(a.member_id, [P, P, P, U, U])
    record(b.member_id, [P, P, P, U, U])

    changed = container.badge_service.refresh_badges(march)

    assert changed == [b.member_id]
    assert container.member_service.get_member(march, a.member_id).badge is Badge.NEWCOMER
    assert container.activity_service.recent(limit=1)[0].details.startswith("Ben:")
