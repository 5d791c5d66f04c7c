from __future__ import annotations

from collections import defaultdict
from dataclasses import asdict, replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.memory_store import InMemoryStore
from .model import EDITABLE_FIELDS, BudgetItem, NewBudgetItem
from .repository import BudgetRepository

TABLE = "budget_items"


class InMemoryBudgetRepository(BudgetRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, BudgetItem]:
        return self._store.table(TABLE)

    def get_by_id(self, budget_item_id: int) -> Optional[BudgetItem]:
        return self._rows.get(int(budget_item_id))

    def list_items(self) -> Sequence[BudgetItem]:
        with self._store.lock:
            return sorted(self._rows.values(), key=lambda b: b.budget_item_id)

    def create(self, data: NewBudgetItem) -> BudgetItem:
        with self._store.lock:
            item = BudgetItem(budget_item_id=self._store.next_id(TABLE), created_at=now_local(), **asdict(data))
            self._rows[item.budget_item_id] = item
            return item

    def update(self, budget_item_id: int, changes: Mapping[str, Any]) -> Optional[BudgetItem]:
        allowed = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        with self._store.lock:
            current = self._rows.get(int(budget_item_id))
            if not current:
                return None
            updated = replace(current, **allowed)
            self._rows[current.budget_item_id] = updated
            return updated

    def delete_by_id(self, budget_item_id: int) -> bool:
        with self._store.lock:
            return self._rows.pop(int(budget_item_id), None) is not None

    def total_estimated(self) -> int:
        with self._store.lock:
            return sum(b.estimated_amount for b in self._rows.values())

    def totals_by_category(self) -> dict[str, int]:
        totals: dict[str, int] = defaultdict(int)
        with self._store.lock:
            for b in self._rows.values():
                totals[b.category] += b.estimated_amount
        return dict(totals)
