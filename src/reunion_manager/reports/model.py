from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class SectionStats:
    section: str
    total_students: int = 0
    attending_count: int = 0
    paid_count: int = 0
    pending_count: int = 0
    not_confirmed_count: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "section": self.section,
            "totalStudents": self.total_students,
            "attendingCount": self.attending_count,
            "paidCount": self.paid_count,
            "pendingCount": self.pending_count,
            "notConfirmedCount": self.not_confirmed_count,
        }


@dataclass(frozen=True)
class DashboardSummary:
    total_students: int
    attending_count: int
    not_attending_count: int
    not_confirmed_count: int
    paid_count: int
    pending_count: int
    not_paid_count: int
    total_contributions: int
    total_expenses: int
    total_budget: int
    budget_utilization: int
    days_remaining: int
    progress_percentage: int
    section_stats: list[SectionStats] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalStudents": self.total_students,
            "attendingCount": self.attending_count,
            "notAttendingCount": self.not_attending_count,
            "notConfirmedCount": self.not_confirmed_count,
            "paidCount": self.paid_count,
            "pendingCount": self.pending_count,
            "notPaidCount": self.not_paid_count,
            "totalContributions": self.total_contributions,
            "totalExpenses": self.total_expenses,
            "totalBudget": self.total_budget,
            "budgetUtilization": self.budget_utilization,
            "daysRemaining": self.days_remaining,
            "progressPercentage": self.progress_percentage,
            "sectionStats": [s.to_dict() for s in self.section_stats],
        }


@dataclass(frozen=True)
class CategoryBreakdown:
    category: str
    estimated_amount: int
    actual_amount: int

    def to_dict(self) -> dict[str, Any]:
        return {
            "category": self.category,
            "estimatedAmount": self.estimated_amount,
            "actualAmount": self.actual_amount,
        }


@dataclass(frozen=True)
class BudgetSummary:
    total_budget: int
    total_expenses: int
    total_contributions: int
    balance: int
    category_breakdown: list[CategoryBreakdown] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalBudget": self.total_budget,
            "totalExpenses": self.total_expenses,
            "totalContributions": self.total_contributions,
            "balance": self.balance,
            "categoryBreakdown": [c.to_dict() for c in self.category_breakdown],
        }
