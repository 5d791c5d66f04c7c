from __future__ import annotations

from datetime import date

import pytest

from reunion_manager.contributions.memory_contribution_repository import InMemoryContributionRepository
from reunion_manager.contributions.service import ContributionService
from reunion_manager.core.enums import Role, Section
from reunion_manager.core.exceptions import NotFoundError, ValidationError
from reunion_manager.users.model import SessionUser

ADMIN = SessionUser(user_id=1, username="admin", role=Role.SUPERADMIN)


@pytest.fixture
def service(store, students):
    return ContributionService(InMemoryContributionRepository(store), students)


@pytest.mark.parametrize("amount", [0, -5, "abc", 12.5, True, None])
def test_create_rejects_non_positive_or_non_integer_amount(service, make_student, amount):
    s = make_student()
    with pytest.raises(ValidationError):
        service.create_contribution(ADMIN, {"studentId": s.student_id, "amount": amount, "date": "2025-01-01"})


def test_create_records_actor_and_parses_date(service, make_student):
    s = make_student()

    c = service.create_contribution(ADMIN, {"studentId": s.student_id, "amount": "250", "date": "2025-01-05T10:00:00Z"})

    assert c.recorded_by == ADMIN.user_id
    assert c.amount == 250
    assert c.date == date(2025, 1, 5)


def test_create_defaults_date_to_today(service, make_student, fixed_now):
    s = make_student()
    c = service.create_contribution(ADMIN, {"studentId": s.student_id, "amount": 100})
    assert c.date == fixed_now.date()


def test_create_for_unknown_student_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.create_contribution(ADMIN, {"studentId": 77, "amount": 100, "date": "2025-01-01"})


def test_update_and_delete_unknown_ids_are_not_found(service):
    with pytest.raises(NotFoundError):
        service.update_contribution(5, {"amount": 10})
    with pytest.raises(NotFoundError):
        service.delete_contribution(5)


def test_update_cannot_move_contribution_to_another_student(service, make_student):
    s1 = make_student()
    s2 = make_student()
    c = service.create_contribution(ADMIN, {"studentId": s1.student_id, "amount": 100, "date": "2025-01-01"})

    with pytest.raises(ValidationError):
        service.update_contribution(c.contribution_id, {"studentId": s2.student_id, "amount": 50})


def test_with_students_embeds_student_and_filters_by_search(service, make_student):
    asha = make_student(first_name="Asha", last_name="Rao", section=Section.B, mobile="9811111111")
    ravi = make_student(first_name="Ravi", last_name="Kumar", section=Section.C, mobile="9822222222")
    service.create_contribution(ADMIN, {"studentId": asha.student_id, "amount": 100, "date": "2025-01-01"})
    service.create_contribution(ADMIN, {"studentId": ravi.student_id, "amount": 200, "date": "2025-01-02"})

    rows = service.list_with_students()
    assert [r["student"]["firstName"] for r in rows] == ["Ravi", "Asha"]

    by_name = service.list_with_students(search="asha rao")
    assert [r["studentId"] for r in by_name] == [asha.student_id]

    by_section = service.list_with_students(search="c")
    assert {r["studentId"] for r in by_section} >= {ravi.student_id}

    by_mobile = service.list_with_students(search="98222")
    assert [r["amount"] for r in by_mobile] == [200]


def test_with_students_paginates_after_search(service, make_student):
    s = make_student(first_name="Meera")
    other = make_student(first_name="Zed")
    for day in range(1, 4):
        service.create_contribution(ADMIN, {"studentId": s.student_id, "amount": day, "date": f"2025-01-0{day}"})
    service.create_contribution(ADMIN, {"studentId": other.student_id, "amount": 50, "date": "2025-01-09"})

    rows = service.list_with_students(search="meera", limit=2)

    assert [r["amount"] for r in rows] == [3, 2]
