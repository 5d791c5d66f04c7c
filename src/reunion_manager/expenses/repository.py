from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import Expense, ExpenseQuery, NewExpense


class ExpenseRepository(Protocol):
    """Actual spending. Listing is ordered by date DESC, expense_id DESC."""

    def get_by_id(self, expense_id: int) -> Optional[Expense]:
        raise NotImplementedError

    def list_expenses(self, query: ExpenseQuery = ExpenseQuery()) -> Sequence[Expense]:
        raise NotImplementedError

    def create(self, data: NewExpense) -> Expense:
        raise NotImplementedError

    def update(self, expense_id: int, changes: Mapping[str, Any]) -> Optional[Expense]:
        raise NotImplementedError

    def delete_by_id(self, expense_id: int) -> bool:
        raise NotImplementedError

    def total_amount(self) -> int:
        raise NotImplementedError

    def totals_by_category(self) -> dict[str, int]:
        raise NotImplementedError
