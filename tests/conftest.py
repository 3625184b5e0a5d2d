from __future__ import annotations

from datetime import date

import pytest

from church_attendance.container import build_container
from church_attendance.core.constants import MONTHS_TABLE
from church_attendance.core.enums import CopyMode
from church_attendance.core.exceptions import StoreError
from church_attendance.database.memory_store import InMemoryRecordStore
from church_attendance.dates.model import MonthId
from church_attendance.members.model import NewMember


class FlakyStore(InMemoryRecordStore):
    """In-memory store that can fail row writes or refuse ALTERs."""

    def __init__(self, *, fail_update_ids=(), fail_add_column=False):
        super().__init__()
        self.fail_update_ids = {int(i) for i in fail_update_ids}
        self.fail_add_column = fail_add_column

    def update(self, table, row_id, fields):
        if table != MONTHS_TABLE and int(row_id) in self.fail_update_ids:
            raise StoreError("Lock wait timeout exceeded")
        return super().update(table, row_id, fields)

    def add_column(self, table, column_name):
        if self.fail_add_column:
            raise StoreError("ALTER command denied to user")
        return super().add_column(table, column_name)


@pytest.fixture
def flaky_store_cls():
    return FlakyStore


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def make_container(sleeps):
    def _make(store):
        return build_container(
            store=store,
            cache_ttl_seconds=120,
            ready_retries=3,
            ready_backoff_seconds=0.5,
            sleep=sleeps.append,
        )

    return _make


@pytest.fixture
def container(make_container, store):
    return make_container(store)


@pytest.fixture
def add_members(container):
    def _add(month: MonthId, *names: str, **fields):
        return [
            container.member_service.add_member(month, NewMember(full_name=name, gender="Female", **fields))
            for name in names
        ]

    return _add


@pytest.fixture
def march(container):
    """March 2026 has five Sundays: 1, 8, 15, 22, 29."""
    container.month_manager.create_month("March", 2026, CopyMode.EMPTY)
    return MonthId("March", 2026)


@pytest.fixture
def march_sundays():
    return [date(2026, 3, d) for d in (1, 8, 15, 22, 29)]
