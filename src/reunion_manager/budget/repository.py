from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import BudgetItem, NewBudgetItem


class BudgetRepository(Protocol):
    def get_by_id(self, budget_item_id: int) -> Optional[BudgetItem]:
        raise NotImplementedError

    def list_items(self) -> Sequence[BudgetItem]:
        raise NotImplementedError

    def create(self, data: NewBudgetItem) -> BudgetItem:
        raise NotImplementedError

    def update(self, budget_item_id: int, changes: Mapping[str, Any]) -> Optional[BudgetItem]:
        raise NotImplementedError

    def delete_by_id(self, budget_item_id: int) -> bool:
        raise NotImplementedError

    def total_estimated(self) -> int:
        raise NotImplementedError

    def totals_by_category(self) -> dict[str, int]:
        raise NotImplementedError
