from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Sequence

from .budget.memory_budget_repository import InMemoryBudgetRepository
from .budget.mysql_budget_repository import MySQLBudgetRepository
from .budget.repository import BudgetRepository
from .budget.service import BudgetService
from .categories.memory_category_repository import InMemoryCategoryRepository
from .categories.mysql_category_repository import MySQLCategoryRepository
from .categories.repository import CategoryRepository
from .categories.service import CategoryService
from .common.datetime_utils import parse_iso_date
from .contributions.memory_contribution_repository import InMemoryContributionRepository
from .contributions.mysql_contribution_repository import MySQLContributionRepository
from .contributions.repository import ContributionRepository
from .contributions.service import ContributionService
from .core.constants import DEFAULT_PLANNING_DAYS, DEFAULT_REUNION_DATE
from .core.enums import ExpenseCategory, Section
from .database.connection import DBConfig, DatabaseConnection
from .database.memory_store import InMemoryStore
from .expenses.memory_expense_repository import InMemoryExpenseRepository
from .expenses.mysql_expense_repository import MySQLExpenseRepository
from .expenses.repository import ExpenseRepository
from .expenses.service import ExpenseService
from .reports.service import ReportService
from .students.memory_student_repository import InMemoryStudentRepository
from .students.mysql_student_repository import MySQLStudentRepository
from .students.repository import StudentRepository
from .students.service import StudentService
from .users.memory_user_repository import InMemoryUserRepository
from .users.mysql_user_repository import MySQLUserRepository
from .users.repository import UserRepository
from .users.service import AuthService, UserService

BACKENDS = ("mysql", "memory")


@dataclass(frozen=True)
class Container:
    backend: str
    conn: Optional[DatabaseConnection]

    users_repo: UserRepository
    students_repo: StudentRepository
    contributions_repo: ContributionRepository
    expenses_repo: ExpenseRepository
    budget_repo: BudgetRepository
    categories_repo: CategoryRepository

    auth_service: AuthService
    user_service: UserService
    student_service: StudentService
    contribution_service: ContributionService
    expense_service: ExpenseService
    budget_service: BudgetService
    category_service: CategoryService
    report_service: ReportService


def build_container(
    *,
    backend: str = "mysql",
    db_config: Optional[dict] = None,
    store: Optional[InMemoryStore] = None,
    sections: Optional[Sequence[str]] = None,
    expense_categories: Optional[Sequence[str]] = None,
    reunion_date: Optional[date] = None,
    planning_days: int = DEFAULT_PLANNING_DAYS,
) -> Container:
    """Wire repositories and services for one storage backend.

    "mysql" builds one connection factory shared by every repository;
    "memory" shares one InMemoryStore so multi-table writes use the same lock.
    """
    if backend not in BACKENDS:
        raise ValueError(f"Unknown storage backend: {backend!r} (expected one of {', '.join(BACKENDS)})")

    known_sections = {s.value for s in Section}
    unknown = [s for s in (sections or []) if s not in known_sections]
    if unknown:
        # the students table only stores the Section enum values
        raise ValueError(
            f"Unknown sections: {', '.join(unknown)} (expected a subset of {', '.join(sorted(known_sections))})"
        )

    conn: Optional[DatabaseConnection] = None
    if backend == "mysql":
        conn = DatabaseConnection(DBConfig.from_dict(db_config or {}))
        users_repo = MySQLUserRepository(conn)
        students_repo = MySQLStudentRepository(conn)
        contributions_repo = MySQLContributionRepository(conn)
        expenses_repo = MySQLExpenseRepository(conn)
        budget_repo = MySQLBudgetRepository(conn)
        categories_repo = MySQLCategoryRepository(conn)
    else:
        store = store or InMemoryStore()
        users_repo = InMemoryUserRepository(store)
        students_repo = InMemoryStudentRepository(store)
        contributions_repo = InMemoryContributionRepository(store)
        expenses_repo = InMemoryExpenseRepository(store)
        budget_repo = InMemoryBudgetRepository(store)
        categories_repo = InMemoryCategoryRepository(store)

    report_service = ReportService(
        students_repo,
        contributions_repo,
        expenses_repo,
        budget_repo,
        sections=sections or [s.value for s in Section],
        expense_categories=expense_categories or [c.value for c in ExpenseCategory],
        reunion_date=reunion_date or parse_iso_date(DEFAULT_REUNION_DATE),
        planning_days=planning_days,
    )

    return Container(
        backend=backend,
        conn=conn,
        users_repo=users_repo,
        students_repo=students_repo,
        contributions_repo=contributions_repo,
        expenses_repo=expenses_repo,
        budget_repo=budget_repo,
        categories_repo=categories_repo,
        auth_service=AuthService(users_repo),
        user_service=UserService(users_repo, students_repo),
        student_service=StudentService(students_repo),
        contribution_service=ContributionService(contributions_repo, students_repo),
        expense_service=ExpenseService(expenses_repo),
        budget_service=BudgetService(budget_repo),
        category_service=CategoryService(categories_repo),
        report_service=report_service,
    )
