from __future__ import annotations

from contextlib import contextmanager
from typing import Any, Dict, List, Optional, Sequence, Tuple

from .connection import DatabaseConnection


@contextmanager
def db_cursor(conn_factory: DatabaseConnection, *, dictionary: bool = True):
    """Yield (conn, cursor) inside one transaction.

    Commits when the block exits cleanly, rolls back on any exception.
    """
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


def build_set_clause(changes: Dict[str, Any]) -> Tuple[str, Sequence[Any]]:
    """Turn {"column": value} into ("column=%s, ...", values) for UPDATE statements.

    Column names always come from repository code, never from request input.
    """
    columns = list(changes.keys())
    clause = ", ".join(f"{col}=%s" for col in columns)
    return clause, [changes[col] for col in columns]


def paginate_clause(limit: Optional[int], offset: Optional[int]) -> Tuple[str, Sequence[int]]:
    # offset is only meaningful together with limit
    if limit is None:
        return "", []
    if offset is not None:
        return " LIMIT %s OFFSET %s", [int(limit), int(offset)]
    return " LIMIT %s", [int(limit)]
