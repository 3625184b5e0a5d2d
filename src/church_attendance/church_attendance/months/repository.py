from __future__ import annotations

from typing import Protocol, Sequence

from ..dates.model import MonthId


class MonthRegistry(Protocol):
    """Months that are ready and shown in navigation."""

    def list_registered(self) -> Sequence[MonthId]:
        raise NotImplementedError

    def exists(self, month: MonthId) -> bool:
        raise NotImplementedError

    def register(self, month: MonthId) -> None:
        raise NotImplementedError
