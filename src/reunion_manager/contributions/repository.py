from __future__ import annotations

from datetime import date
from typing import Optional, Protocol, Sequence

from .model import Contribution, ContributionQuery


class ContributionRepository(Protocol):
    """Contribution ledger.

    Every write keeps the owning student's contribution_amount equal to the sum
    of its ledger rows and runs as one atomic unit in the backing store.

    create() raises NotFoundError for an unknown student and writes nothing.
    The first contribution of a student whose paid_status is not "paid" sets
    it to "paid"; later writes never touch paid_status.
    update()/delete() return None/False for an unknown id without side effects.
    list_contributions() is ordered by date DESC, contribution_id DESC; offset
    only applies together with limit.
    """

    def get(self, contribution_id: int) -> Optional[Contribution]:
        raise NotImplementedError

    def list_contributions(self, query: ContributionQuery = ContributionQuery()) -> Sequence[Contribution]:
        raise NotImplementedError

    def create(
        self,
        *,
        student_id: int,
        amount: int,
        date: date,
        recorded_by: Optional[int] = None,
    ) -> Contribution:
        raise NotImplementedError

    def update(
        self,
        contribution_id: int,
        *,
        amount: Optional[int] = None,
        date: Optional[date] = None,
    ) -> Optional[Contribution]:
        raise NotImplementedError

    def delete(self, contribution_id: int) -> bool:
        raise NotImplementedError

    def total_amount(self) -> int:
        raise NotImplementedError

    def recalculate_student_totals(self) -> int:
        """Rewrite every student's contribution_amount from the ledger; return rows changed."""
        raise NotImplementedError
