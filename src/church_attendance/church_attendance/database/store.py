from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Protocol, Sequence

Row = Dict[str, Any]


@dataclass(frozen=True)
class ColumnInfo:
    name: str
    data_type: str = "text"
    nullable: bool = True


class RecordStore(Protocol):
    """Generic addressable table/row store with schema introspection.

    Every month lives in its own table; attendance fields are columns that get
    added on demand. Implementations raise StoreError for driver failures.
    """

    def query(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> List[Row]:
        raise NotImplementedError

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        raise NotImplementedError

    def update(self, table: str, row_id: int, fields: Mapping[str, Any]) -> Optional[Row]:
        """Return the updated row, or None when ``row_id`` does not exist."""

        raise NotImplementedError

    def delete(self, table: str, row_id: int) -> bool:
        raise NotImplementedError

    def list_columns(self, table: str) -> List[ColumnInfo]:
        """Columns of ``table``; an empty list while the table is not queryable."""

        raise NotImplementedError

    def add_column(self, table: str, column_name: str) -> None:
        raise NotImplementedError

    def create_table_from_template(self, template_table: str, new_table: str, seed_columns: Sequence[str]) -> None:
        raise NotImplementedError

    def table_exists(self, table: str) -> bool:
        raise NotImplementedError
