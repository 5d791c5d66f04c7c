from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional

EDITABLE_FIELDS = ("title", "category", "description", "amount", "date", "receipt_image")


@dataclass(frozen=True)
class Expense:
    expense_id: int
    title: str
    category: str
    description: str
    amount: int
    date: date
    receipt_image: Optional[str] = None
    created_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.expense_id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "receiptImage": self.receipt_image,
            "createdBy": self.created_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NewExpense:
    title: str
    category: str
    description: str
    amount: int
    date: date
    receipt_image: Optional[str] = None
    created_by: Optional[int] = None


@dataclass(frozen=True)
class ExpenseQuery:
    category: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
