from __future__ import annotations

import copy
import threading
from datetime import datetime
from typing import Any, Dict, List, Mapping, Optional, Sequence

from ..core.exceptions import StoreError
from .mysql_base import quote_ident
from .schema import BASE_TABLES
from .store import ColumnInfo, RecordStore, Row


class _Table:
    def __init__(self, columns: Sequence[str]):
        self.columns: List[str] = list(columns)
        self.rows: Dict[int, Row] = {}
        self.next_id = 1


class InMemoryRecordStore(RecordStore):
    """Dict-backed RecordStore used for demo mode (no database configured) and tests.

    ``ready_after`` makes a table created from the template report no columns
    for its first N ``list_columns`` calls, like a store that is slow to expose
    new tables.
    """

    def __init__(self, *, with_base_tables: bool = True, ready_after: int = 0):
        self._tables: Dict[str, _Table] = {}
        self.ready_after = int(ready_after)
        self._pending: Dict[str, int] = {}
        self._lock = threading.RLock()
        if with_base_tables:
            for name, columns in BASE_TABLES.items():
                self._tables[name] = _Table(columns)

    def _table(self, name: str) -> _Table:
        quote_ident(name)
        tbl = self._tables.get(name)
        if tbl is None:
            raise StoreError(f"Table '{name}' doesn't exist")
        return tbl

    def _check_columns(self, tbl: _Table, table: str, keys) -> None:
        unknown = [k for k in keys if k not in tbl.columns]
        if unknown:
            raise StoreError(f"Unknown column '{unknown[0]}' in '{table}'")

    def query(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> List[Row]:
        with self._lock:
            tbl = self._table(table)
            filters = dict(filters or {})
            self._check_columns(tbl, table, filters)
            out = [
                copy.deepcopy(r)
                for _, r in sorted(tbl.rows.items())
                if all(r.get(k) == v for k, v in filters.items())
            ]
            return out

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        with self._lock:
            tbl = self._table(table)
            for row in rows:
                self._check_columns(tbl, table, row)
            out: List[Row] = []
            for row in rows:
                new_id = tbl.next_id
                tbl.next_id += 1
                stored = {c: None for c in tbl.columns}
                stored.update({k: copy.deepcopy(v) for k, v in row.items() if k != "id"})
                stored["id"] = new_id
                if "inserted_at" in tbl.columns and stored.get("inserted_at") is None:
                    stored["inserted_at"] = datetime.now()
                if "created_at" in tbl.columns and stored.get("created_at") is None:
                    stored["created_at"] = datetime.now()
                tbl.rows[new_id] = stored
                out.append(copy.deepcopy(stored))
            return out

    def update(self, table: str, row_id: int, fields: Mapping[str, Any]) -> Optional[Row]:
        with self._lock:
            tbl = self._table(table)
            self._check_columns(tbl, table, fields)
            row = tbl.rows.get(int(row_id))
            if row is None:
                return None
            row.update({k: copy.deepcopy(v) for k, v in fields.items() if k != "id"})
            return copy.deepcopy(row)

    def delete(self, table: str, row_id: int) -> bool:
        with self._lock:
            tbl = self._table(table)
            return tbl.rows.pop(int(row_id), None) is not None

    def list_columns(self, table: str) -> List[ColumnInfo]:
        with self._lock:
            tbl = self._tables.get(table)
            if tbl is None:
                return []
            if self._pending.get(table, 0) > 0:
                self._pending[table] -= 1
                return []
            return [ColumnInfo(name=c) for c in tbl.columns]

    def add_column(self, table: str, column_name: str) -> None:
        quote_ident(column_name)
        with self._lock:
            tbl = self._table(table)
            if column_name in tbl.columns:
                raise StoreError(f"Duplicate column name '{column_name}'")
            tbl.columns.append(column_name)
            for row in tbl.rows.values():
                row[column_name] = None

    def create_table_from_template(self, template_table: str, new_table: str, seed_columns: Sequence[str]) -> None:
        quote_ident(new_table)
        with self._lock:
            template = self._table(template_table)
            tbl = self._tables.get(new_table)
            if tbl is None:
                tbl = _Table(template.columns)
                self._tables[new_table] = tbl
            self._pending[new_table] = self.ready_after
            for name in seed_columns:
                quote_ident(name)
                if name not in tbl.columns:
                    tbl.columns.append(name)
                    for row in tbl.rows.values():
                        row[name] = None

    def table_exists(self, table: str) -> bool:
        with self._lock:
            return table in self._tables
