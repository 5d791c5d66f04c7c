from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from ..core.enums import CategoryType

EDITABLE_FIELDS = {"name", "type", "description"}


@dataclass(frozen=True)
class Category:
    """A named label usable by expenses, budget items, or both."""

    category_id: int
    name: str
    type: CategoryType
    description: Optional[str] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.category_id,
            "name": self.name,
            "type": self.type.value,
            "description": self.description,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
