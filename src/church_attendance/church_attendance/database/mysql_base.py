from __future__ import annotations

import re
from contextlib import contextmanager
from typing import Any, Dict, List, Optional

from ..core.exceptions import ValidationError
from .connection import DatabaseConnection

_IDENT_RE = re.compile(r"^[A-Za-z0-9_]+$")


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    conn = conn_factory.connect()
    try:
        cur = conn.cursor(dictionary=dictionary)
        try:
            yield conn, cur
            conn.commit()
        finally:
            cur.close()
    except Exception:
        conn.rollback()
        raise
    finally:
        conn.close()


def fetchone(cur) -> Optional[Dict[str, Any]]:
    row = cur.fetchone()
    return row if row else None


def fetchall(cur) -> List[Dict[str, Any]]:
    rows = cur.fetchall()
    return list(rows or [])


def quote_ident(name: str) -> str:
    """Backtick-quote a table/column name after checking it is a plain identifier.

    Month tables and attendance fields are created at runtime, so names can not
    be bound as query parameters.
    """
    if not name or not _IDENT_RE.match(name):
        raise ValidationError(f"Invalid identifier: {name!r}")
    return f"`{name}`"
