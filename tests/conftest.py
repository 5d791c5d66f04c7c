from __future__ import annotations

from datetime import datetime

import pytest

from reunion_manager import create_app
from reunion_manager.common import datetime_utils
from reunion_manager.core.enums import Gender, Section
from reunion_manager.database.memory_store import InMemoryStore
from reunion_manager.students.memory_student_repository import InMemoryStudentRepository
from reunion_manager.students.model import NewStudent

FIXED_NOW = datetime(2025, 3, 1, 9, 30, 0)

# modules that imported now_local by name
_NOW_LOCAL_USERS = (
    "reunion_manager.common.datetime_utils",
    "reunion_manager.students.memory_student_repository",
    "reunion_manager.contributions.memory_contribution_repository",
    "reunion_manager.expenses.memory_expense_repository",
    "reunion_manager.budget.memory_budget_repository",
    "reunion_manager.categories.memory_category_repository",
    "reunion_manager.reports.service",
)


@pytest.fixture
def fixed_now(monkeypatch):
    for module in _NOW_LOCAL_USERS:
        monkeypatch.setattr(f"{module}.now_local", lambda: FIXED_NOW)
    assert datetime_utils.today_local() == FIXED_NOW.date()
    return FIXED_NOW


@pytest.fixture
def store():
    return InMemoryStore()


@pytest.fixture
def students(store):
    return InMemoryStudentRepository(store)


@pytest.fixture
def make_student(students):
    counter = {"n": 0}

    def _make(section: Section = Section.A, **overrides):
        counter["n"] += 1
        data = dict(
            first_name=f"Student{counter['n']}",
            last_name="Test",
            section=section,
            gender=Gender.OTHER,
            mobile=f"90000000{counter['n']:02d}",
        )
        data.update(overrides)
        return students.create(NewStudent(**data))

    return _make


@pytest.fixture
def app():
    app = create_app("reunion_manager.config.testing")
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def login(client):
    def _login(username: str = "admin", password: str = "admin123"):
        return client.post("/api/login", json={"username": username, "password": password})

    return _login
