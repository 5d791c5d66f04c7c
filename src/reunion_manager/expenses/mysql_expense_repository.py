from __future__ import annotations

from dataclasses import asdict
from typing import Any, Mapping, Optional, Sequence

from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchall, fetchone, paginate_clause
from .model import EDITABLE_FIELDS, Expense, ExpenseQuery, NewExpense
from .repository import ExpenseRepository

_SELECT = """
    SELECT expense_id, title, category, description, amount, date, receipt_image, created_by, created_at
    FROM expenses
"""


def _row_to_expense(r: Mapping[str, Any]) -> Expense:
    created_by = r.get("created_by")
    return Expense(
        expense_id=int(r["expense_id"]),
        title=r["title"],
        category=r["category"],
        description=r.get("description") or "",
        amount=int(r["amount"]),
        date=r["date"],
        receipt_image=r.get("receipt_image"),
        created_by=int(created_by) if created_by is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLExpenseRepository(ExpenseRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE expense_id=%s", (int(expense_id),))
            r = fetchone(cur)
            return _row_to_expense(r) if r else None

    def list_expenses(self, query: ExpenseQuery = ExpenseQuery()) -> Sequence[Expense]:
        where = ""
        params: list[object] = []
        if query.category:
            where = " WHERE category=%s"
            params.append(query.category)

        page_sql, page_params = paginate_clause(query.limit, query.offset)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT}{where} ORDER BY date DESC, expense_id DESC{page_sql}",
                tuple(params + list(page_params)),
            )
            return [_row_to_expense(r) for r in fetchall(cur)]

    def create(self, data: NewExpense) -> Expense:
        values = asdict(data)
        columns = ", ".join(values.keys())
        placeholders = ", ".join(["%s"] * len(values))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"INSERT INTO expenses({columns}) VALUES({placeholders})", tuple(values.values()))
            cur.execute(f"{_SELECT} WHERE expense_id=%s", (int(cur.lastrowid),))
            return _row_to_expense(fetchone(cur))

    def update(self, expense_id: int, changes: Mapping[str, Any]) -> Optional[Expense]:
        allowed = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        with db_cursor(self._conn_factory) as (_, cur):
            if allowed:
                set_sql, values = build_set_clause(allowed)
                cur.execute(
                    f"UPDATE expenses SET {set_sql} WHERE expense_id=%s",
                    tuple(values) + (int(expense_id),),
                )
            cur.execute(f"{_SELECT} WHERE expense_id=%s", (int(expense_id),))
            r = fetchone(cur)
            return _row_to_expense(r) if r else None

    def delete_by_id(self, expense_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM expenses WHERE expense_id=%s", (int(expense_id),))
            return cur.rowcount > 0

    def total_amount(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COALESCE(SUM(amount), 0) AS total FROM expenses")
            return int(fetchone(cur)["total"])

    def totals_by_category(self) -> dict[str, int]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT category, COALESCE(SUM(amount), 0) AS total FROM expenses GROUP BY category")
            return {r["category"]: int(r["total"]) for r in fetchall(cur)}
