from __future__ import annotations

from datetime import date

import pytest

from church_attendance.core.constants import MONTHS_TABLE
from church_attendance.core.enums import AttendanceStatus, Badge, CopyMode, MonthState
from church_attendance.core.exceptions import NotFoundError, NotReadyError, ValidationError
from church_attendance.database.memory_store import InMemoryRecordStore
from church_attendance.dates.mapping import is_attendance_field
from church_attendance.dates.model import MonthId

JANUARY = MonthId("January", 2026)
FEBRUARY = MonthId("February", 2026)


def _attendance_columns(store, month):
    return sorted(c.name for c in store.list_columns(month.table_name) if is_attendance_field(c.name))


def test_create_empty_month(container, store):
    result = container.month_manager.create_month("January", 2026)

    assert result.created is True
    assert result.copy_mode is CopyMode.EMPTY
    assert result.copied_count == 0
    assert result.source is None
    assert result.sundays == [date(2026, 1, d) for d in (4, 11, 18, 25)]
    assert _attendance_columns(store, JANUARY) == [
        "attendance_2026_01_04",
        "attendance_2026_01_11",
        "attendance_2026_01_18",
        "attendance_2026_01_25",
    ]
    assert container.month_manager.state(JANUARY) is MonthState.READY
    assert container.month_manager.list_months() == [JANUARY]


def test_copy_selected_members_into_next_month(container, add_members, store):
    container.month_manager.create_month("January", 2026)
    joined = date(2025, 12, 7)
    members = add_members(JANUARY, "Ann", "Ben", "Cleo", "Dan", join_date=joined)
    container.member_service.update_member(JANUARY, members[2].member_id, {"badge": "regular"})
    container.attendance_service.mark_attendance(JANUARY, members[0].member_id, date(2026, 1, 4), "present")

    result = container.month_manager.create_month(
        "February", 2026, CopyMode.CUSTOM, [members[0].member_id, members[2].member_id]
    )

    assert result.created is True
    assert result.source == JANUARY
    assert result.copied_count == 2
    copied = container.member_service.list_members(FEBRUARY)
    assert [m.full_name for m in copied] == ["Ann", "Cleo"]
    assert [m.badge for m in copied] == [Badge.NEWCOMER, Badge.REGULAR]
    assert all(m.join_date == joined for m in copied)
    assert all(s is AttendanceStatus.UNSET for m in copied for s in m.attendance.values())
    assert set(copied[0].attendance) == {date(2026, 2, d) for d in (1, 8, 15, 22)}
    # Source month untouched.
    assert len(container.member_service.list_members(JANUARY)) == 4


def test_copy_all_members(container, add_members):
    container.month_manager.create_month("January", 2026)
    add_members(JANUARY, "Ann", "Ben", "Cleo")

    result = container.month_manager.create_month("February", 2026, "all")

    assert result.copied_count == 3
    assert [m.full_name for m in container.member_service.list_members(FEBRUARY)] == ["Ann", "Ben", "Cleo"]


def test_empty_mode_ignores_source_members(container, add_members):
    container.month_manager.create_month("January", 2026)
    add_members(JANUARY, "Ann")

    result = container.month_manager.create_month("February", 2026, CopyMode.EMPTY, [1])

    assert result.copied_count == 0
    assert container.member_service.list_members(FEBRUARY) == []


def test_create_existing_month_is_a_no_op(container, add_members, store):
    container.month_manager.create_month("January", 2026)
    add_members(JANUARY, "Ann")
    container.month_manager.create_month("February", 2026, CopyMode.ALL)

    again = container.month_manager.create_month("February", 2026, CopyMode.ALL)

    assert again.created is False
    assert len(container.member_service.list_members(FEBRUARY)) == 1
    assert len(store.query(MONTHS_TABLE, {"table_name": "February_2026"})) == 1


def test_waits_for_new_table_to_become_queryable(make_container, sleeps):
    store = InMemoryRecordStore(ready_after=2)
    container = make_container(store)

    result = container.month_manager.create_month("March", 2026)

    assert result.created is True
    assert sleeps == [0.5, 0.5]


def test_not_ready_after_retries_leaves_month_unregistered(make_container, sleeps):
    store = InMemoryRecordStore(ready_after=10)
    container = make_container(store)
    month = MonthId("March", 2026)

    with pytest.raises(NotReadyError):
        container.month_manager.create_month("March", 2026)

    assert sleeps == [0.5, 0.5]
    assert container.month_manager.list_months() == []
    assert container.month_manager.state(month) is MonthState.PROVISIONING

    store.ready_after = 0
    retry = container.month_manager.create_month("March", 2026)
    assert retry.created is True
    assert container.month_manager.state(month) is MonthState.READY


def test_retry_after_interrupted_copy_does_not_duplicate(container, add_members, store):
    container.month_manager.create_month("January", 2026)
    add_members(JANUARY, "Ann", "Ben")
    # A previous attempt created and filled the table but never registered it.
    store.create_table_from_template("member_template", FEBRUARY.table_name, [])
    store.insert(FEBRUARY.table_name, [{"full_name": "Ann", "gender": "Female"}])

    result = container.month_manager.create_month("February", 2026, CopyMode.ALL)

    assert result.created is True
    assert result.copied_count == 0
    assert len(container.member_service.list_members(FEBRUARY)) == 1


def test_months_are_listed_chronologically(container):
    for name, year in (("March", 2026), ("January", 2026), ("December", 2025)):
        container.month_manager.create_month(name, year)

    assert [m.table_name for m in container.month_manager.list_months()] == [
        "December_2025",
        "January_2026",
        "March_2026",
    ]
    assert container.month_manager.latest_month() == MonthId("March", 2026)


@pytest.mark.parametrize(
    "name, year, mode",
    [
        ("Smarch", 2026, "empty"),
        ("March", 1800, "empty"),
        ("March", 2026, "some"),
    ],
)
def test_create_month_validates_input(container, name, year, mode):
    with pytest.raises(ValidationError):
        container.month_manager.create_month(name, year, mode)


@pytest.mark.parametrize("selected", [["abc"], [1, "x"], "1,2", {"id": 1}])
def test_create_month_rejects_bad_member_ids_before_creating(container, add_members, store, selected):
    container.month_manager.create_month("January", 2026)
    add_members(JANUARY, "Ann")

    with pytest.raises(ValidationError):
        container.month_manager.create_month("February", 2026, CopyMode.CUSTOM, selected)

    assert not store.table_exists(FEBRUARY.table_name)
    assert container.month_manager.list_months() == [JANUARY]


def test_require_month(container):
    container.month_manager.create_month("January", 2026)

    assert container.month_manager.require_month("January_2026") == JANUARY
    with pytest.raises(NotFoundError):
        container.month_manager.require_month("February_2026")
    assert container.month_manager.state(FEBRUARY) is MonthState.NONEXISTENT


def test_create_month_logs_activity(container):
    container.month_manager.create_month("January", 2026)

    entry = container.activity_service.recent(limit=1)[0]
    assert entry.month == "January_2026"
    assert "4 Sundays" in entry.details
