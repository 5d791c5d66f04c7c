from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.memory_store import InMemoryStore
from .model import EDITABLE_FIELDS, Expense, ExpenseQuery, NewExpense
from .repository import ExpenseRepository

TABLE = "expenses"


class InMemoryExpenseRepository(ExpenseRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, Expense]:
        return self._store.table(TABLE)

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        return self._rows.get(int(expense_id))

    def list_expenses(self, query: ExpenseQuery = ExpenseQuery()) -> Sequence[Expense]:
        with self._store.lock:
            items = list(self._rows.values())

        if query.category:
            items = [e for e in items if e.category == query.category]
        items.sort(key=lambda e: (e.date, e.expense_id), reverse=True)

        if query.limit is not None:
            start = query.offset or 0
            items = items[start : start + query.limit]
        return items

    def create(self, data: NewExpense) -> Expense:
        with self._store.lock:
            expense = Expense(expense_id=self._store.next_id(TABLE), created_at=now_local(), **asdict(data))
            self._rows[expense.expense_id] = expense
            return expense

    def update(self, expense_id: int, changes: Mapping[str, Any]) -> Optional[Expense]:
        allowed = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        with self._store.lock:
            current = self._rows.get(int(expense_id))
            if not current:
                return None
            updated = replace(current, **allowed)
            self._rows[current.expense_id] = updated
            return updated

    def delete_by_id(self, expense_id: int) -> bool:
        with self._store.lock:
            return self._rows.pop(int(expense_id), None) is not None

    def total_amount(self) -> int:
        with self._store.lock:
            return sum(e.amount for e in self._rows.values())

    def totals_by_category(self) -> dict[str, int]:
        totals: dict[str, int] = defaultdict(int)
        with self._store.lock:
            for e in self._rows.values():
                totals[e.category] += e.amount
        return dict(totals)
