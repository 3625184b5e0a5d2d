from __future__ import annotations

import logging
from typing import Any, List, Mapping, Optional, Sequence

from mysql.connector import Error as MySQLError

from ..core.exceptions import StoreError
from .connection import DatabaseConnection
from .mysql_base import db_cursor, fetchall, fetchone, quote_ident
from .store import ColumnInfo, RecordStore, Row

logger = logging.getLogger(__name__)


class MySQLRecordStore(RecordStore):
    """RecordStore over MySQL, one short-lived connection per call."""

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _run(self, op: str, table: str, fn):
        try:
            return fn()
        except MySQLError as e:
            logger.warning("mysql %s on %s failed: %s", op, table, e)
            raise StoreError(str(e)) from e

    def query(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> List[Row]:
        clauses = []
        params: list[object] = []
        for key, value in (filters or {}).items():
            if value is None:
                clauses.append(f"{quote_ident(key)} IS NULL")
            else:
                clauses.append(f"{quote_ident(key)}=%s")
                params.append(value)
        where = f" WHERE {' AND '.join(clauses)}" if clauses else ""
        sql = f"SELECT * FROM {quote_ident(table)}{where} ORDER BY `id` ASC"

        def _do():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql, tuple(params))
                return fetchall(cur)

        return self._run("query", table, _do)

    def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> List[Row]:
        if not rows:
            return []
        tbl = quote_ident(table)

        def _do():
            out: List[Row] = []
            with db_cursor(self._conn_factory) as (_, cur):
                for row in rows:
                    cols = [c for c in row.keys() if c != "id"]
                    placeholders = ",".join(["%s"] * len(cols))
                    cur.execute(
                        f"INSERT INTO {tbl}({','.join(quote_ident(c) for c in cols)}) VALUES({placeholders})",
                        tuple(row[c] for c in cols),
                    )
                    new_id = int(cur.lastrowid)
                    cur.execute(f"SELECT * FROM {tbl} WHERE `id`=%s", (new_id,))
                    out.append(fetchone(cur) or {**row, "id": new_id})
            return out

        return self._run("insert", table, _do)

    def update(self, table: str, row_id: int, fields: Mapping[str, Any]) -> Optional[Row]:
        tbl = quote_ident(table)
        assignments = ", ".join(f"{quote_ident(k)}=%s" for k in fields)

        def _do():
            with db_cursor(self._conn_factory) as (_, cur):
                if assignments:
                    cur.execute(
                        f"UPDATE {tbl} SET {assignments} WHERE `id`=%s",
                        (*fields.values(), int(row_id)),
                    )
                # rowcount is 0 for unchanged values, so re-read to tell "missing" apart.
                cur.execute(f"SELECT * FROM {tbl} WHERE `id`=%s", (int(row_id),))
                return fetchone(cur)

        return self._run("update", table, _do)

    def delete(self, table: str, row_id: int) -> bool:
        tbl = quote_ident(table)

        def _do():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"DELETE FROM {tbl} WHERE `id`=%s", (int(row_id),))
                return cur.rowcount > 0

        return self._run("delete", table, _do)

    def list_columns(self, table: str) -> List[ColumnInfo]:
        quote_ident(table)

        def _do():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    """
                    SELECT COLUMN_NAME AS name, DATA_TYPE AS data_type, IS_NULLABLE AS nullable
                    FROM INFORMATION_SCHEMA.COLUMNS
                    WHERE TABLE_SCHEMA=%s AND TABLE_NAME=%s
                    ORDER BY ORDINAL_POSITION
                    """,
                    (self._conn_factory.database, table),
                )
                return [
                    ColumnInfo(name=r["name"], data_type=str(r["data_type"]), nullable=r["nullable"] == "YES")
                    for r in fetchall(cur)
                ]

        return self._run("list_columns", table, _do)

    def add_column(self, table: str, column_name: str) -> None:
        sql = f"ALTER TABLE {quote_ident(table)} ADD COLUMN {quote_ident(column_name)} TINYINT(1) NULL DEFAULT NULL"

        def _do():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(sql)

        logger.info("adding column %s to %s", column_name, table)
        self._run("add_column", table, _do)

    def create_table_from_template(self, template_table: str, new_table: str, seed_columns: Sequence[str]) -> None:
        tbl = quote_ident(new_table)
        template = quote_ident(template_table)
        seeds = [quote_ident(c) for c in seed_columns]

        def _do():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(f"CREATE TABLE IF NOT EXISTS {tbl} LIKE {template}")
                cur.execute(
                    """
                    SELECT COLUMN_NAME AS name FROM INFORMATION_SCHEMA.COLUMNS
                    WHERE TABLE_SCHEMA=%s AND TABLE_NAME=%s
                    """,
                    (self._conn_factory.database, new_table),
                )
                existing = {r["name"] for r in fetchall(cur)}
                for name, quoted in zip(seed_columns, seeds):
                    if name not in existing:
                        cur.execute(f"ALTER TABLE {tbl} ADD COLUMN {quoted} TINYINT(1) NULL DEFAULT NULL")

        logger.info("creating table %s from %s with %d seed columns", new_table, template_table, len(seeds))
        self._run("create_table_from_template", new_table, _do)

    def table_exists(self, table: str) -> bool:
        quote_ident(table)

        def _do():
            with db_cursor(self._conn_factory) as (_, cur):
                cur.execute(
                    "SELECT COUNT(*) AS n FROM INFORMATION_SCHEMA.TABLES WHERE TABLE_SCHEMA=%s AND TABLE_NAME=%s",
                    (self._conn_factory.database, table),
                )
                row = fetchone(cur)
                return bool(row and int(row["n"]) > 0)

        return self._run("table_exists", table, _do)
