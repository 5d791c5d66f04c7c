from __future__ import annotations

import logging
from collections import defaultdict
from dataclasses import replace
from datetime import date
from typing import Optional, Sequence

from ..common.datetime_utils import now_local
from ..core.enums import PaidStatus
from ..core.exceptions import NotFoundError
from ..database.memory_store import InMemoryStore
from .model import Contribution, ContributionQuery
from .repository import ContributionRepository

logger = logging.getLogger(__name__)

TABLE = "contributions"
STUDENTS = "students"


class InMemoryContributionRepository(ContributionRepository):
    """Ledger on the shared in-memory store.

    Each operation holds the store lock for its whole read-modify-write, so the
    ledger row and the student's total change together.
    """

    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, Contribution]:
        return self._store.table(TABLE)

    @property
    def _students(self) -> dict:
        return self._store.table(STUDENTS)

    def _add_to_student(self, student_id: int, delta: int, *, floor_at_zero: bool = False, **changes) -> None:
        student = self._students.get(student_id)
        if student is None:
            return
        total = student.contribution_amount + delta
        if floor_at_zero:
            total = max(0, total)
        self._students[student_id] = replace(student, contribution_amount=total, **changes)

    def get(self, contribution_id: int) -> Optional[Contribution]:
        return self._rows.get(int(contribution_id))

    def list_contributions(self, query: ContributionQuery = ContributionQuery()) -> Sequence[Contribution]:
        with self._store.lock:
            items = list(self._rows.values())

        if query.student_id is not None:
            items = [c for c in items if c.student_id == int(query.student_id)]

        items.sort(key=lambda c: (c.date, c.contribution_id), reverse=True)

        if query.limit is not None:
            start = query.offset or 0
            items = items[start : start + query.limit]
        return items

    def create(
        self,
        *,
        student_id: int,
        amount: int,
        date: date,
        recorded_by: Optional[int] = None,
    ) -> Contribution:
        with self._store.lock:
            student = self._students.get(int(student_id))
            if student is None:
                raise NotFoundError("Student not found")

            contribution = Contribution(
                contribution_id=self._store.next_id(TABLE),
                student_id=student.student_id,
                amount=int(amount),
                date=date,
                recorded_by=recorded_by,
                created_at=now_local(),
            )
            self._rows[contribution.contribution_id] = contribution

            count = sum(1 for c in self._rows.values() if c.student_id == student.student_id)
            if count == 1 and student.paid_status != PaidStatus.PAID:
                self._add_to_student(student.student_id, contribution.amount, paid_status=PaidStatus.PAID)
            else:
                self._add_to_student(student.student_id, contribution.amount)
            return contribution

    def update(
        self,
        contribution_id: int,
        *,
        amount: Optional[int] = None,
        date: Optional[date] = None,
    ) -> Optional[Contribution]:
        with self._store.lock:
            current = self._rows.get(int(contribution_id))
            if current is None:
                return None

            changes = {}
            delta = 0
            if amount is not None and int(amount) != current.amount:
                changes["amount"] = int(amount)
                delta = int(amount) - current.amount
            if date is not None:
                changes["date"] = date

            updated = replace(current, **changes)
            self._rows[current.contribution_id] = updated
            if delta:
                self._add_to_student(current.student_id, delta)
            return updated

    def delete(self, contribution_id: int) -> bool:
        with self._store.lock:
            removed = self._rows.pop(int(contribution_id), None)
            if removed is None:
                return False
            self._add_to_student(removed.student_id, -removed.amount, floor_at_zero=True)
            return True

    def total_amount(self) -> int:
        with self._store.lock:
            return sum(c.amount for c in self._rows.values())

    def recalculate_student_totals(self) -> int:
        with self._store.lock:
            totals: dict[int, int] = defaultdict(int)
            for c in self._rows.values():
                totals[c.student_id] += c.amount

            changed = 0
            for student_id, student in list(self._students.items()):
                expected = totals.get(student_id, 0)
                if student.contribution_amount != expected:
                    self._students[student_id] = replace(student, contribution_amount=expected)
                    changed += 1

        logger.info("Recalculated contribution totals: %d students changed", changed)
        return changed
