"""Attendance reads/writes against per-month tables.

This is the only module that knows attendance is stored as one column per
Sunday. Everything above it works with ``(member_id, date) -> status``.
"""

from __future__ import annotations

import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from ..common.cache import TTLCache
from ..core.enums import AttendanceStatus
from ..core.exceptions import CannotCreateFieldError, NotFoundError, PartialFailure, StoreError
from ..database.store import RecordStore
from ..dates.mapping import attendance_field_id, decode_field_id, is_field_for_date
from ..dates.model import MonthId
from .model import BulkResult

logger = logging.getLogger(__name__)


class AttendanceStoreAdapter:
    def __init__(self, store: RecordStore, cache: TTLCache):
        self._store = store
        self._cache = cache

    # -- field resolution -------------------------------------------------

    def _load_fields(self, month: MonthId) -> Dict[date, str]:
        fields: Dict[date, str] = {}
        for col in self._store.list_columns(month.table_name):
            day = decode_field_id(col.name)
            if day is not None:
                fields[day] = col.name
        return fields

    def field_map(self, month: MonthId) -> Dict[date, str]:
        """Existing attendance fields of the month table, keyed by date."""
        return self._cache.get_or_load((month.table_name, "fields"), lambda: self._load_fields(month))

    def resolve_field(self, month: MonthId, day: date) -> Optional[str]:
        for existing_day, name in self.field_map(month).items():
            if existing_day == day and is_field_for_date(name, day):
                return name
        return None

    def ensure_field(self, month: MonthId, day: date) -> str:
        """Return the field for ``day``, adding the column first when it is missing."""
        name = self.resolve_field(month, day)
        if name:
            return name

        name = attendance_field_id(day)
        logger.info("provisioning attendance field %s on %s", name, month.table_name)
        try:
            self._store.add_column(month.table_name, name)
        except StoreError as e:
            # Another writer may have added it in the meantime.
            self._cache.invalidate(month.table_name)
            if self.resolve_field(month, day):
                return name
            raise CannotCreateFieldError(f"Cannot create attendance field {name} on {month.table_name}: {e}") from e
        finally:
            self._cache.invalidate(month.table_name)
        return name

    def field_dates(self, month: MonthId) -> List[date]:
        return sorted(self.field_map(month))

    # -- reads ------------------------------------------------------------

    def get_attendance(self, month: MonthId, member_id: int, day: date) -> AttendanceStatus:
        name = self.resolve_field(month, day)
        if name is None:
            return AttendanceStatus.UNSET

        rows = self._store.query(month.table_name, {"id": int(member_id)})
        if not rows:
            raise NotFoundError(f"Member {member_id} not found in {month.table_name}")
        return AttendanceStatus.from_stored(rows[0].get(name))

    def list_attendance_for_date(self, month: MonthId, day: date) -> Dict[int, AttendanceStatus]:
        name = self.resolve_field(month, day)
        rows = self._store.query(month.table_name)
        if name is None:
            return {int(r["id"]): AttendanceStatus.UNSET for r in rows}
        return {int(r["id"]): AttendanceStatus.from_stored(r.get(name)) for r in rows}

    def attendance_matrix(self, month: MonthId) -> Dict[int, Dict[date, AttendanceStatus]]:
        fields = self.field_map(month)
        matrix: Dict[int, Dict[date, AttendanceStatus]] = {}
        for row in self._store.query(month.table_name):
            matrix[int(row["id"])] = {
                day: AttendanceStatus.from_stored(row.get(name)) for day, name in fields.items()
            }
        return matrix

    # -- writes -----------------------------------------------------------

    def set_attendance(self, month: MonthId, member_id: int, day: date, status: AttendanceStatus) -> AttendanceStatus:
        name = self.ensure_field(month, day)
        try:
            row = self._store.update(month.table_name, int(member_id), {name: status.to_stored()})
        finally:
            self._cache.invalidate(month.table_name)
        if row is None:
            raise NotFoundError(f"Member {member_id} not found in {month.table_name}")
        return status

    def bulk_set_attendance(
        self,
        month: MonthId,
        member_ids: Iterable[int],
        day: date,
        status: AttendanceStatus,
    ) -> BulkResult:
        """Write one status for many members; no rollback of rows that succeeded."""
        name = self.ensure_field(month, day)
        value = status.to_stored()

        succeeded: List[int] = []
        failed: List[int] = []
        try:
            for member_id in dict.fromkeys(int(m) for m in member_ids):
                try:
                    row = self._store.update(month.table_name, member_id, {name: value})
                except StoreError as e:
                    logger.warning("attendance write failed for member %s on %s: %s", member_id, name, e)
                    failed.append(member_id)
                    continue
                if row is None:
                    failed.append(member_id)
                else:
                    succeeded.append(member_id)
        finally:
            self._cache.invalidate(month.table_name)

        if failed:
            raise PartialFailure(
                f"Failed to update {len(failed)} of {len(failed) + len(succeeded)} records",
                failed_ids=failed,
                succeeded_ids=succeeded,
            )
        return BulkResult(day=day, status=status, succeeded_ids=tuple(succeeded))
