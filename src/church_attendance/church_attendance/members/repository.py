from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from ..dates.model import MonthId
from .model import Member


class MemberRepository(Protocol):
    """Member rows of a month table.

    Note: services depend on this interface, not on a concrete store.
    """

    def list_members(self, month: MonthId) -> Sequence[Member]:
        raise NotImplementedError

    def get_member(self, month: MonthId, member_id: int) -> Optional[Member]:
        raise NotImplementedError

    def insert_members(self, month: MonthId, rows: Sequence[Mapping[str, Any]]) -> Sequence[Member]:
        raise NotImplementedError

    def update_member(self, month: MonthId, member_id: int, fields: Mapping[str, Any]) -> Optional[Member]:
        raise NotImplementedError

    def delete_member(self, month: MonthId, member_id: int) -> bool:
        raise NotImplementedError
