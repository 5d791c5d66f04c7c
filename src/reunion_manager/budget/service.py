from __future__ import annotations

from typing import Any, Mapping, Sequence

from ..common.validators import optional_text, require_int, require_non_empty
from ..core.exceptions import NotFoundError
from .model import BudgetItem, NewBudgetItem
from .repository import BudgetRepository


class BudgetService:
    """Planned budget line items."""

    def __init__(self, items: BudgetRepository):
        self._items = items

    def list_items(self) -> Sequence[BudgetItem]:
        return self._items.list_items()

    def create_item(self, payload: Mapping[str, Any]) -> BudgetItem:
        data = NewBudgetItem(
            name=require_non_empty(payload.get("name"), "Name"),
            category=require_non_empty(payload.get("category"), "Category"),
            description=optional_text(payload.get("description")) or "",
            estimated_amount=require_int(
                payload.get("estimatedAmount", payload.get("estimated_amount")),
                "Estimated amount",
                minimum=0,
            ),
        )
        return self._items.create(data)

    def update_item(self, budget_item_id: int, payload: Mapping[str, Any]) -> BudgetItem:
        changes: dict[str, Any] = {}
        if "name" in payload:
            changes["name"] = require_non_empty(payload["name"], "Name")
        if "category" in payload:
            changes["category"] = require_non_empty(payload["category"], "Category")
        if "description" in payload:
            changes["description"] = optional_text(payload["description"]) or ""
        for key in ("estimatedAmount", "estimated_amount"):
            if key in payload:
                changes["estimated_amount"] = require_int(payload[key], "Estimated amount", minimum=0)

        updated = self._items.update(int(budget_item_id), changes)
        if not updated:
            raise NotFoundError("Budget item not found")
        return updated

    def delete_item(self, budget_item_id: int) -> None:
        if not self._items.delete_by_id(int(budget_item_id)):
            raise NotFoundError("Budget item not found")
