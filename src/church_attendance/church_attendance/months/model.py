from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from ..core.enums import CopyMode
from ..dates.model import MonthId


@dataclass(frozen=True)
class MonthResult:
    month: MonthId
    created: bool
    copy_mode: CopyMode
    source: Optional[MonthId] = None
    copied_count: int = 0
    sundays: List[date] = field(default_factory=list)

    def as_dict(self) -> Dict[str, object]:
        return {
            "month": self.month.table_name,
            "created": self.created,
            "copy_mode": self.copy_mode.value,
            "source": self.source.table_name if self.source else None,
            "copied_count": self.copied_count,
            "sundays": [d.isoformat() for d in self.sundays],
        }
