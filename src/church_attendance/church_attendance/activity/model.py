from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import ActivityAction


@dataclass(frozen=True)
class ActivityEntry:
    entry_id: int
    action: ActivityAction
    details: Optional[str]
    month: Optional[str]
    created_at: Optional[datetime]
