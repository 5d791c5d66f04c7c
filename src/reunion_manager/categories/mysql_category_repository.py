from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import CategoryType
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchall, fetchone
from .model import EDITABLE_FIELDS, Category
from .repository import CategoryRepository

_SELECT = "SELECT category_id, name, type, description, created_at FROM categories"


def _row_to_category(r: Mapping[str, Any]) -> Category:
    return Category(
        category_id=int(r["category_id"]),
        name=r["name"],
        type=CategoryType(r["type"]),
        description=r.get("description"),
        created_at=r.get("created_at"),
    )


class MySQLCategoryRepository(CategoryRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, category_id: int) -> Optional[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE category_id=%s", (int(category_id),))
            r = fetchone(cur)
            return _row_to_category(r) if r else None

    def get_by_name(self, name: str) -> Optional[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE name=%s", (name,))
            r = fetchone(cur)
            return _row_to_category(r) if r else None

    def list_categories(self) -> Sequence[Category]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY name")
            return [_row_to_category(r) for r in fetchall(cur)]

    def create(self, *, name: str, type: CategoryType, description: Optional[str] = None) -> Category:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "INSERT INTO categories(name, type, description) VALUES(%s,%s,%s)",
                (name, type.value, description),
            )
            cur.execute(f"{_SELECT} WHERE category_id=%s", (int(cur.lastrowid),))
            return _row_to_category(fetchone(cur))

    def update(self, category_id: int, changes: Mapping[str, Any]) -> Optional[Category]:
        allowed = {
            k: v.value if isinstance(v, Enum) else v for k, v in changes.items() if k in EDITABLE_FIELDS
        }
        with db_cursor(self._conn_factory) as (_, cur):
            if allowed:
                set_sql, values = build_set_clause(allowed)
                cur.execute(
                    f"UPDATE categories SET {set_sql} WHERE category_id=%s",
                    tuple(values) + (int(category_id),),
                )
            cur.execute(f"{_SELECT} WHERE category_id=%s", (int(category_id),))
            r = fetchone(cur)
            return _row_to_category(r) if r else None

    def delete_by_id(self, category_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM categories WHERE category_id=%s", (int(category_id),))
            return cur.rowcount > 0
