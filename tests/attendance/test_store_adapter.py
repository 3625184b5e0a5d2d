from __future__ import annotations

from datetime import date

import pytest

from church_attendance.core.enums import AttendanceStatus, CopyMode
from church_attendance.core.exceptions import CannotCreateFieldError, NotFoundError, PartialFailure
from church_attendance.dates.model import MonthId


def test_fresh_month_reads_unset(container, march, add_members, march_sundays):
    (alice,) = add_members(march, "Alice")
    adapter = container.attendance_adapter

    assert adapter.field_dates(march) == march_sundays
    assert adapter.get_attendance(march, alice.member_id, march_sundays[0]) is AttendanceStatus.UNSET


def test_missing_field_reads_unset_without_creating_it(container, march, add_members, store):
    (alice,) = add_members(march, "Alice")
    tuesday = date(2026, 3, 3)

    status = container.attendance_adapter.get_attendance(march, alice.member_id, tuesday)

    assert status is AttendanceStatus.UNSET
    assert "attendance_2026_03_03" not in {c.name for c in store.list_columns(march.table_name)}


def test_set_then_get_round_trips_all_states(container, march, add_members, march_sundays):
    (alice,) = add_members(march, "Alice")
    adapter = container.attendance_adapter
    day = march_sundays[1]

    for status in (AttendanceStatus.PRESENT, AttendanceStatus.ABSENT, AttendanceStatus.UNSET):
        adapter.set_attendance(march, alice.member_id, day, status)
        assert adapter.get_attendance(march, alice.member_id, day) is status


def test_set_attendance_is_idempotent(container, march, add_members, store, march_sundays):
    (alice,) = add_members(march, "Alice")
    adapter = container.attendance_adapter
    day = march_sundays[0]

    adapter.set_attendance(march, alice.member_id, day, AttendanceStatus.PRESENT)
    columns = [c.name for c in store.list_columns(march.table_name)]
    row = dict(store.query(march.table_name, {"id": alice.member_id})[0])

    adapter.set_attendance(march, alice.member_id, day, AttendanceStatus.PRESENT)

    assert store.query(march.table_name, {"id": alice.member_id})[0] == row
    assert [c.name for c in store.list_columns(march.table_name)] == columns
    assert adapter.get_attendance(march, alice.member_id, day) is AttendanceStatus.PRESENT


def test_set_attendance_stores_booleans(container, march, add_members, store, march_sundays):
    (alice,) = add_members(march, "Alice")
    container.attendance_adapter.set_attendance(march, alice.member_id, march_sundays[0], AttendanceStatus.ABSENT)

    row = store.query(march.table_name, {"id": alice.member_id})[0]
    assert row["attendance_2026_03_01"] is False
    assert row["attendance_2026_03_08"] is None


def test_set_attendance_provisions_missing_field(container, march, add_members, store):
    (alice,) = add_members(march, "Alice")
    adapter = container.attendance_adapter
    extra = date(2026, 3, 3)
    adapter.field_map(march)  # warm the cache

    adapter.set_attendance(march, alice.member_id, extra, AttendanceStatus.PRESENT)

    assert "attendance_2026_03_03" in {c.name for c in store.list_columns(march.table_name)}
    assert extra in adapter.field_dates(march)
    assert adapter.get_attendance(march, alice.member_id, extra) is AttendanceStatus.PRESENT


def test_ensure_field_is_idempotent(container, march, store):
    adapter = container.attendance_adapter
    first = adapter.ensure_field(march, date(2026, 3, 1))
    again = adapter.ensure_field(march, date(2026, 3, 1))

    assert first == again == "attendance_2026_03_01"
    names = [c.name for c in store.list_columns(march.table_name)]
    assert names.count("attendance_2026_03_01") == 1


def test_add_column_refused_raises_cannot_create_field(flaky_store_cls, make_container):
    store = flaky_store_cls(fail_add_column=True)
    container = make_container(store)
    container.month_manager.create_month("March", 2026, CopyMode.EMPTY)
    month = MonthId("March", 2026)

    with pytest.raises(CannotCreateFieldError):
        container.attendance_adapter.ensure_field(month, date(2026, 3, 3))

    # Seeded Sundays are unaffected.
    assert container.attendance_adapter.ensure_field(month, date(2026, 3, 1)) == "attendance_2026_03_01"


def test_set_attendance_for_unknown_member(container, march, march_sundays):
    with pytest.raises(NotFoundError):
        container.attendance_adapter.set_attendance(march, 42, march_sundays[0], AttendanceStatus.PRESENT)


def test_get_attendance_for_unknown_member(container, march, march_sundays):
    with pytest.raises(NotFoundError):
        container.attendance_adapter.get_attendance(march, 42, march_sundays[0])


def test_list_attendance_for_date(container, march, add_members, march_sundays):
    alice, bob, carol = add_members(march, "Alice", "Bob", "Carol")
    adapter = container.attendance_adapter
    day = march_sundays[2]
    adapter.set_attendance(march, alice.member_id, day, AttendanceStatus.PRESENT)
    adapter.set_attendance(march, bob.member_id, day, AttendanceStatus.ABSENT)

    assert adapter.list_attendance_for_date(march, day) == {
        alice.member_id: AttendanceStatus.PRESENT,
        bob.member_id: AttendanceStatus.ABSENT,
        carol.member_id: AttendanceStatus.UNSET,
    }


def test_bulk_set_attendance_dedupes_ids(container, march, add_members, march_sundays):
    alice, bob = add_members(march, "Alice", "Bob")

    result = container.attendance_adapter.bulk_set_attendance(
        march, [alice.member_id, bob.member_id, alice.member_id], march_sundays[0], AttendanceStatus.PRESENT
    )

    assert result.succeeded_ids == (alice.member_id, bob.member_id)


def test_bulk_partial_failure_keeps_successful_rows(flaky_store_cls, make_container):
    store = flaky_store_cls(fail_update_ids=[2])
    container = make_container(store)
    container.month_manager.create_month("March", 2026, CopyMode.EMPTY)
    month = MonthId("March", 2026)
    for name in ("Alice", "Bob", "Carol"):
        store.insert(month.table_name, [{"full_name": name, "gender": "Female"}])
    day = date(2026, 3, 8)
    adapter = container.attendance_adapter

    with pytest.raises(PartialFailure) as exc_info:
        adapter.bulk_set_attendance(month, [1, 2, 3], day, AttendanceStatus.PRESENT)

    assert exc_info.value.failed_ids == [2]
    assert exc_info.value.succeeded_ids == [1, 3]
    assert adapter.get_attendance(month, 1, day) is AttendanceStatus.PRESENT
    assert adapter.get_attendance(month, 2, day) is AttendanceStatus.UNSET
    assert adapter.get_attendance(month, 3, day) is AttendanceStatus.PRESENT


def test_bulk_unknown_member_is_reported_as_failed(container, march, add_members, march_sundays):
    (alice,) = add_members(march, "Alice")

    with pytest.raises(PartialFailure) as exc_info:
        container.attendance_adapter.bulk_set_attendance(
            march, [alice.member_id, 99], march_sundays[0], AttendanceStatus.ABSENT
        )

    assert exc_info.value.failed_ids == [99]
    assert exc_info.value.succeeded_ids == [alice.member_id]


def test_attendance_matrix(container, march, add_members, march_sundays):
    alice, bob = add_members(march, "Alice", "Bob")
    adapter = container.attendance_adapter
    adapter.set_attendance(march, alice.member_id, march_sundays[0], AttendanceStatus.PRESENT)

    matrix = adapter.attendance_matrix(march)

    assert set(matrix) == {alice.member_id, bob.member_id}
    assert matrix[alice.member_id][march_sundays[0]] is AttendanceStatus.PRESENT
    assert all(s is AttendanceStatus.UNSET for s in matrix[bob.member_id].values())
