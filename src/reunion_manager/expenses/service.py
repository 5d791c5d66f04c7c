from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import (
    optional_date,
    optional_int,
    optional_text,
    require_date,
    require_int,
    require_non_empty,
)
from ..core.exceptions import NotFoundError
from ..users.model import SessionUser
from .model import Expense, ExpenseQuery, NewExpense
from .repository import ExpenseRepository


def _clean_changes(payload: Mapping[str, Any]) -> dict[str, Any]:
    changes: dict[str, Any] = {}
    if "title" in payload:
        changes["title"] = require_non_empty(payload["title"], "Title")
    if "category" in payload:
        changes["category"] = require_non_empty(payload["category"], "Category")
    if "description" in payload:
        changes["description"] = optional_text(payload["description"]) or ""
    if "amount" in payload:
        changes["amount"] = require_int(payload["amount"], "Amount", minimum=0)
    if "date" in payload:
        changes["date"] = require_date(payload["date"], "Date")
    for key in ("receiptImage", "receipt_image"):
        if key in payload:
            changes["receipt_image"] = optional_text(payload[key])
    return changes


class ExpenseService:
    def __init__(self, expenses: ExpenseRepository):
        self._expenses = expenses

    def list_expenses(
        self,
        *,
        category: Optional[str] = None,
        limit: Any = None,
        offset: Any = None,
    ) -> Sequence[Expense]:
        query = ExpenseQuery(
            category=optional_text(category),
            limit=optional_int(limit, "Limit", minimum=0),
            offset=optional_int(offset, "Offset", minimum=0),
        )
        return self._expenses.list_expenses(query)

    def get_expense(self, expense_id: int) -> Expense:
        expense = self._expenses.get_by_id(int(expense_id))
        if not expense:
            raise NotFoundError("Expense not found")
        return expense

    def create_expense(self, actor: SessionUser, payload: Mapping[str, Any]) -> Expense:
        data = NewExpense(
            title=require_non_empty(payload.get("title"), "Title"),
            category=require_non_empty(payload.get("category"), "Category"),
            description=optional_text(payload.get("description")) or "",
            amount=require_int(payload.get("amount"), "Amount", minimum=0),
            date=optional_date(payload.get("date"), "Date") or today_local(),
            receipt_image=optional_text(payload.get("receiptImage", payload.get("receipt_image"))),
            created_by=actor.user_id,
        )
        return self._expenses.create(data)

    def update_expense(self, expense_id: int, payload: Mapping[str, Any]) -> Expense:
        updated = self._expenses.update(int(expense_id), _clean_changes(payload))
        if not updated:
            raise NotFoundError("Expense not found")
        return updated

    def delete_expense(self, expense_id: int) -> None:
        if not self._expenses.delete_by_id(int(expense_id)):
            raise NotFoundError("Expense not found")
