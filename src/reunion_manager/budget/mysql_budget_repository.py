from __future__ import annotations

from dataclasses import asdict
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchall, fetchone
from .model import EDITABLE_FIELDS, BudgetItem, NewBudgetItem
from .repository import BudgetRepository

_SELECT = "SELECT budget_item_id, name, category, description, estimated_amount, created_at FROM budget_items"


def _row_to_item(r: Mapping[str, Any]) -> BudgetItem:
    return BudgetItem(
        budget_item_id=int(r["budget_item_id"]),
        name=r["name"],
        category=r["category"],
        description=r.get("description") or "",
        estimated_amount=int(r["estimated_amount"]),
        created_at=r.get("created_at"),
    )


class MySQLBudgetRepository(BudgetRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, budget_item_id: int) -> Optional[BudgetItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE budget_item_id=%s", (int(budget_item_id),))
            r = fetchone(cur)
            return _row_to_item(r) if r else None

    def list_items(self) -> Sequence[BudgetItem]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY budget_item_id")
            return [_row_to_item(r) for r in fetchall(cur)]

    def create(self, data: NewBudgetItem) -> BudgetItem:
        values = asdict(data)
        columns = ", ".join(values.keys())
        placeholders = ", ".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO budget_items({columns}) VALUES({placeholders})", tuple(values.values()))
            cur.execute(f"{_SELECT} WHERE budget_item_id=%s", (int(cur.lastrowid),))
            return _row_to_item(fetchone(cur))

    def update(self, budget_item_id: int, changes: Mapping[str, Any]) -> Optional[BudgetItem]:
        allowed = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        with db_cursor(self._conn_factory) as (_, cur):
            if allowed:
                set_sql, values = build_set_clause(allowed)
                cur.execute(
                    f"UPDATE budget_items SET {set_sql} WHERE budget_item_id=%s",
                    tuple(values) + (int(budget_item_id),),
                )
            cur.execute(f"{_SELECT} WHERE budget_item_id=%s", (int(budget_item_id),))
            r = fetchone(cur)
            return _row_to_item(r) if r else None

    def delete_by_id(self, budget_item_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM budget_items WHERE budget_item_id=%s", (int(budget_item_id),))
            return cur.rowcount > 0

    def total_estimated(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COALESCE(SUM(estimated_amount), 0) AS total FROM budget_items")
            return int(fetchone(cur)["total"])

    def totals_by_category(self) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT category, COALESCE(SUM(estimated_amount), 0) AS total FROM budget_items GROUP BY category"
            )
            return {r["category"]: int(r["total"]) for r in fetchall(cur)}
