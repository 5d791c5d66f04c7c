from __future__ import annotations

import math
from datetime import date, datetime, time
from typing import Optional, Sequence, Union

from ..budget.repository import BudgetRepository
from ..common.datetime_utils import now_local
from ..contributions.repository import ContributionRepository
from ..core.enums import AttendingStatus, PaidStatus
from ..expenses.repository import ExpenseRepository
from ..students.model import Student, StudentQuery
from ..students.repository import StudentRepository
from .model import BudgetSummary, CategoryBreakdown, DashboardSummary, SectionStats

SECONDS_PER_DAY = 24 * 60 * 60


def round_half_up(value: float) -> int:
    """Round halves up (2.5 -> 3), unlike the banker's rounding of round()."""
    return int(math.floor(value + 0.5))


def days_until(target: date, today: Union[date, datetime]) -> int:
    """Whole days left until `target` (midnight), never negative."""
    if isinstance(today, datetime):
        delta = datetime.combine(target, time.min) - today
        days = math.floor(delta.total_seconds() / SECONDS_PER_DAY)
    else:
        days = (target - today).days
    return max(0, days)


def _count(students: Sequence[Student], **criteria) -> int:
    return sum(1 for s in students if all(getattr(s, k) == v for k, v in criteria.items()))


class ReportService:
    """Dashboard and budget aggregates.

    Contribution totals always come from the ledger, not from the per-student
    cached totals.
    """

    def __init__(
        self,
        students: StudentRepository,
        contributions: ContributionRepository,
        expenses: ExpenseRepository,
        budget: BudgetRepository,
        *,
        sections: Sequence[str],
        expense_categories: Sequence[str],
        reunion_date: date,
        planning_days: int,
    ):
        self._students = students
        self._contributions = contributions
        self._expenses = expenses
        self._budget = budget
        self._sections = list(sections)
        self._expense_categories = list(expense_categories)
        self._reunion_date = reunion_date
        self._planning_days = int(planning_days)

    def _section_stats(self, students: Sequence[Student]) -> list[SectionStats]:
        out: list[SectionStats] = []
        for section in self._sections:
            members = [s for s in students if s.section.value == section]
            out.append(
                SectionStats(
                    section=section,
                    total_students=len(members),
                    attending_count=_count(members, attending_status=AttendingStatus.ATTENDING),
                    paid_count=_count(members, paid_status=PaidStatus.PAID),
                    pending_count=_count(members, paid_status=PaidStatus.PENDING),
                    not_confirmed_count=_count(members, attending_status=AttendingStatus.NOT_CONFIRMED),
                )
            )
        return out

    def get_dashboard_summary(self, today: Optional[Union[date, datetime]] = None) -> DashboardSummary:
        students = list(self._students.list_students(StudentQuery()))

        total_contributions = self._contributions.total_amount()
        total_expenses = self._expenses.total_amount()
        total_budget = self._budget.total_estimated()

        budget_utilization = 0
        if total_budget > 0:
            budget_utilization = round_half_up(total_expenses / total_budget * 100)

        days_remaining = days_until(self._reunion_date, today if today is not None else now_local())

        progress = 100
        if self._planning_days > 0:
            elapsed = self._planning_days - days_remaining
            progress = min(100, max(0, round_half_up(elapsed / self._planning_days * 100)))

        return DashboardSummary(
            total_students=len(students),
            attending_count=_count(students, attending_status=AttendingStatus.ATTENDING),
            not_attending_count=_count(students, attending_status=AttendingStatus.NOT_ATTENDING),
            not_confirmed_count=_count(students, attending_status=AttendingStatus.NOT_CONFIRMED),
            paid_count=_count(students, paid_status=PaidStatus.PAID),
            pending_count=_count(students, paid_status=PaidStatus.PENDING),
            not_paid_count=_count(students, paid_status=PaidStatus.NOT_PAID),
            total_contributions=total_contributions,
            total_expenses=total_expenses,
            total_budget=total_budget,
            budget_utilization=budget_utilization,
            days_remaining=days_remaining,
            progress_percentage=progress,
            section_stats=self._section_stats(students),
        )

    def get_budget_summary(self) -> BudgetSummary:
        estimated = self._budget.totals_by_category()
        actual = self._expenses.totals_by_category()

        total_budget = sum(estimated.values())
        total_expenses = sum(actual.values())
        total_contributions = self._contributions.total_amount()

        # categories outside the configured list still count in the totals above
        breakdown = [
            CategoryBreakdown(
                category=category,
                estimated_amount=estimated.get(category, 0),
                actual_amount=actual.get(category, 0),
            )
            for category in self._expense_categories
        ]

        return BudgetSummary(
            total_budget=total_budget,
            total_expenses=total_expenses,
            total_contributions=total_contributions,
            balance=total_contributions - total_expenses,
            category_breakdown=breakdown,
        )
