from __future__ import annotations

from datetime import datetime
from typing import List, Optional

from ..core.constants import ACTIVITY_TABLE
from ..core.enums import ActivityAction
from ..database.store import RecordStore
from .model import ActivityEntry
from .repository import ActivityRepository


class StoreActivityRepository(ActivityRepository):
    def __init__(self, store: RecordStore):
        self._store = store

    def append(self, *, action: ActivityAction, details: Optional[str], month: Optional[str]) -> int:
        rows = self._store.insert(ACTIVITY_TABLE, [{"action": action.value, "details": details, "month": month}])
        return int(rows[0]["id"])

    def list_recent(self, *, limit: int) -> List[ActivityEntry]:
        rows = self._store.query(ACTIVITY_TABLE)
        # Newest first; ids are monotonic so they break created_at ties.
        rows.sort(key=lambda r: (r.get("created_at") or datetime.min, int(r["id"])), reverse=True)
        return [
            ActivityEntry(
                entry_id=int(r["id"]),
                action=ActivityAction(r["action"]),
                details=r.get("details"),
                month=r.get("month"),
                created_at=r.get("created_at"),
            )
            for r in rows[: int(limit)]
        ]
