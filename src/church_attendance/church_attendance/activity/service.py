from __future__ import annotations

import logging
from typing import Optional, Sequence

from ..core.constants import DEFAULT_ACTIVITY_LIMIT
from ..core.enums import ActivityAction
from ..core.exceptions import StoreError
from .model import ActivityEntry
from .repository import ActivityRepository

logger = logging.getLogger(__name__)


class ActivityService:
    """Simple append-only activity log shown on the admin screen."""

    def __init__(self, activity: ActivityRepository):
        self._activity = activity

    def record(self, action: ActivityAction, details: str = "", *, month: Optional[str] = None) -> None:
        # Best effort: the logged write has already been committed.
        try:
            self._activity.append(action=action, details=details or None, month=month)
        except StoreError as e:
            logger.warning("could not record activity %s (%s): %s", action.value, month, e)

    def recent(self, *, limit: int = DEFAULT_ACTIVITY_LIMIT) -> Sequence[ActivityEntry]:
        return self._activity.list_recent(limit=limit)
