from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

EDITABLE_FIELDS = ("name", "category", "description", "estimated_amount")


@dataclass(frozen=True)
class BudgetItem:
    """A planned cost line. Compared against actual expenses by category."""

    budget_item_id: int
    name: str
    category: str
    description: str
    estimated_amount: int
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.budget_item_id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "estimatedAmount": self.estimated_amount,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NewBudgetItem:
    name: str
    category: str
    description: str
    estimated_amount: int
