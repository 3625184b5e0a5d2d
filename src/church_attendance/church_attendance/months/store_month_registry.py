from __future__ import annotations

import logging
from typing import List

from ..core.constants import MONTHS_TABLE
from ..core.exceptions import ValidationError
from ..database.store import RecordStore
from ..dates.model import MonthId
from .repository import MonthRegistry

logger = logging.getLogger(__name__)


class StoreMonthRegistry(MonthRegistry):
    def __init__(self, store: RecordStore):
        self._store = store

    def list_registered(self) -> List[MonthId]:
        months: List[MonthId] = []
        for row in self._store.query(MONTHS_TABLE):
            try:
                months.append(MonthId.of(row["name"], int(row["year"])))
            except ValidationError:
                logger.warning("ignoring unknown month registry row %r", row.get("table_name"))
        return sorted(set(months), key=lambda m: m.sort_key)

    def exists(self, month: MonthId) -> bool:
        return bool(self._store.query(MONTHS_TABLE, {"table_name": month.table_name}))

    def register(self, month: MonthId) -> None:
        if self.exists(month):
            return
        self._store.insert(
            MONTHS_TABLE,
            [{"name": month.name, "year": month.year, "table_name": month.table_name}],
        )
