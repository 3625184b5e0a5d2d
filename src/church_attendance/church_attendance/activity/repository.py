from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import ActivityAction
from .model import ActivityEntry


class ActivityRepository(Protocol):
    def append(self, *, action: ActivityAction, details: Optional[str], month: Optional[str]) -> int:
        raise NotImplementedError

    def list_recent(self, *, limit: int) -> Sequence[ActivityEntry]:
        raise NotImplementedError
