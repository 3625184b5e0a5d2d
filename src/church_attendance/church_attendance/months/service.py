from __future__ import annotations

import logging
import threading
import time
from typing import Callable, Iterable, List, Optional, Sequence

from ..activity.service import ActivityService
from ..common.cache import TTLCache
from ..common.validators import require_ids, require_year
from ..core.constants import DEFAULT_READY_BACKOFF_SECONDS, DEFAULT_READY_RETRIES, MEMBER_TEMPLATE_TABLE
from ..core.enums import ActivityAction, CopyMode, MonthState
from ..core.exceptions import NotFoundError, NotReadyError, StoreError, ValidationError
from ..database.store import RecordStore
from ..dates.mapping import attendance_field_id, sundays_in_month
from ..dates.model import MonthId
from ..members.model import Member
from ..members.repository import MemberRepository
from ..members.store_member_repository import member_to_row
from .model import MonthResult
from .repository import MonthRegistry

logger = logging.getLogger(__name__)


class MonthLifecycleManager:
    """Use case: create a month's table, seed it with members, register it.

    State per month: nonexistent -> provisioning -> ready.
    """

    def __init__(
        self,
        store: RecordStore,
        registry: MonthRegistry,
        members: MemberRepository,
        activity: ActivityService,
        cache: TTLCache,
        *,
        ready_retries: int = DEFAULT_READY_RETRIES,
        ready_backoff_seconds: float = DEFAULT_READY_BACKOFF_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._store = store
        self._registry = registry
        self._members = members
        self._activity = activity
        self._cache = cache
        self._ready_retries = max(1, int(ready_retries))
        self._ready_backoff = float(ready_backoff_seconds)
        self._sleep = sleep
        self._provisioning: set[str] = set()
        self._lock = threading.Lock()

    def list_months(self) -> List[MonthId]:
        return sorted(self._registry.list_registered(), key=lambda m: m.sort_key)

    def latest_month(self) -> Optional[MonthId]:
        months = self.list_months()
        return months[-1] if months else None

    def require_month(self, table_name: str) -> MonthId:
        month = MonthId.parse(table_name)
        if not self._registry.exists(month):
            raise NotFoundError(f"Month {month.table_name} does not exist")
        return month

    def state(self, month: MonthId) -> MonthState:
        if self._registry.exists(month):
            return MonthState.READY
        with self._lock:
            if month.table_name in self._provisioning:
                return MonthState.PROVISIONING
        if self._store.table_exists(month.table_name):
            # Table created by an earlier attempt that never finished.
            return MonthState.PROVISIONING
        return MonthState.NONEXISTENT

    def _wait_until_ready(self, month: MonthId, seed_columns: Sequence[str]) -> None:
        """Poll until the new table is queryable and carries every seed column."""
        last_error: Optional[Exception] = None
        for attempt in range(1, self._ready_retries + 1):
            try:
                names = {c.name for c in self._store.list_columns(month.table_name)}
                if names and all(c in names for c in seed_columns):
                    self._store.query(month.table_name, {"id": 0})
                    return
            except StoreError as e:
                last_error = e
            logger.info(
                "table %s not ready (attempt %d/%d)",
                month.table_name,
                attempt,
                self._ready_retries,
            )
            if attempt < self._ready_retries:
                self._sleep(self._ready_backoff)

        msg = f"Table {month.table_name} not ready after {self._ready_retries} attempts"
        if last_error is not None:
            msg += f": {last_error}"
        raise NotReadyError(msg)

    @staticmethod
    def _select_members(
        members: Sequence[Member],
        copy_mode: CopyMode,
        selected_member_ids: Sequence[int],
    ) -> List[Member]:
        if copy_mode is CopyMode.ALL:
            return list(members)
        if copy_mode is CopyMode.CUSTOM:
            wanted = set(selected_member_ids)
            return [m for m in members if m.member_id in wanted]
        return []

    def create_month(
        self,
        month_name: str,
        year: int,
        copy_mode: CopyMode | str = CopyMode.EMPTY,
        selected_member_ids: Optional[Iterable[int]] = None,
    ) -> MonthResult:
        month = MonthId.of(month_name, require_year(year))
        try:
            copy_mode = CopyMode(copy_mode)
        except ValueError:
            raise ValidationError(f"Unknown copy mode: {copy_mode!r}")
        selected_ids = require_ids(selected_member_ids, "member id")
        sundays = sundays_in_month(month.name, month.year)

        if self._registry.exists(month):
            logger.info("month %s already exists; nothing to do", month.table_name)
            return MonthResult(month=month, created=False, copy_mode=copy_mode, sundays=sundays)

        with self._lock:
            if month.table_name in self._provisioning:
                return MonthResult(month=month, created=False, copy_mode=copy_mode, sundays=sundays)
            self._provisioning.add(month.table_name)

        try:
            source = self.latest_month()
            seed_columns = [attendance_field_id(d) for d in sundays]

            self._store.create_table_from_template(MEMBER_TEMPLATE_TABLE, month.table_name, seed_columns)
            self._wait_until_ready(month, seed_columns)

            copied = 0
            if self._store.query(month.table_name):
                # Leftover rows from an interrupted attempt; copying again would duplicate them.
                logger.warning("table %s already has members; skipping copy", month.table_name)
            elif source is not None and copy_mode is not CopyMode.EMPTY:
                chosen = self._select_members(self._members.list_members(source), copy_mode, selected_ids)
                if chosen:
                    copied = len(self._members.insert_members(month, [member_to_row(m) for m in chosen]))

            self._registry.register(month)
        finally:
            with self._lock:
                self._provisioning.discard(month.table_name)
            self._cache.invalidate(month.table_name)

        self._activity.record(
            ActivityAction.CREATE_MONTH,
            f"{month.table_name} created ({copy_mode.value}, {copied} members, {len(sundays)} Sundays)",
            month=month.table_name,
        )
        logger.info("created month %s from %s with %d members", month.table_name, source, copied)
        return MonthResult(
            month=month,
            created=True,
            copy_mode=copy_mode,
            source=source,
            copied_count=copied,
            sundays=sundays,
        )
