from __future__ import annotations

from datetime import date

import pytest

from reunion_manager.contributions.memory_contribution_repository import InMemoryContributionRepository
from reunion_manager.core.enums import AttendingStatus, Gender, PaidStatus, Role, Section
from reunion_manager.core.exceptions import AuthorizationError, NotFoundError, ValidationError
from reunion_manager.students.model import NewStudent
from reunion_manager.students.service import StudentService, parse_new_student
from reunion_manager.users.model import SessionUser

SUPERADMIN = SessionUser(user_id=1, username="admin", role=Role.SUPERADMIN)
ADMIN_B = SessionUser(user_id=2, username="admin-b", role=Role.SECTION_ADMIN, section=Section.B)


@pytest.fixture
def service(students):
    return StudentService(students)


def _payload(**overrides):
    data = {
        "firstName": "Asha",
        "lastName": "Rao",
        "section": "B",
        "gender": "female",
        "mobile": "9811111111",
    }
    data.update(overrides)
    return data


def test_parse_new_student_applies_defaults_and_converts_types():
    record = parse_new_student(_payload(dob="1990-05-17", email="  "))

    assert record.section == Section.B
    assert record.gender == Gender.FEMALE
    assert record.dob == date(1990, 5, 17)
    assert record.email is None
    assert record.attending_status == AttendingStatus.NOT_CONFIRMED
    assert record.paid_status == PaidStatus.NOT_PAID


def test_parse_new_student_requires_core_fields():
    with pytest.raises(ValidationError):
        parse_new_student(_payload(mobile=""))
    with pytest.raises(ValidationError):
        parse_new_student(_payload(section="Z"))


def test_create_ignores_contribution_amount(service):
    student = service.create_student(SUPERADMIN, _payload(contributionAmount=5000))
    assert student.contribution_amount == 0


def test_create_rejects_duplicate_mobile(service):
    service.create_student(SUPERADMIN, _payload())
    with pytest.raises(ValidationError):
        service.create_student(SUPERADMIN, _payload(firstName="Other"))


def test_section_admin_can_only_create_in_own_section(service):
    assert service.create_student(ADMIN_B, _payload()).section == Section.B
    with pytest.raises(AuthorizationError):
        service.create_student(ADMIN_B, _payload(section="A", mobile="9800000000"))


def test_section_admin_cannot_move_student_out_of_section(service):
    student = service.create_student(ADMIN_B, _payload())
    with pytest.raises(AuthorizationError):
        service.update_student(ADMIN_B, student.student_id, {"section": "C"})


def test_update_rejects_mobile_taken_by_another_student(service):
    first = service.create_student(SUPERADMIN, _payload())
    second = service.create_student(SUPERADMIN, _payload(mobile="9822222222"))

    with pytest.raises(ValidationError):
        service.update_student(SUPERADMIN, second.student_id, {"mobile": first.mobile})

    # keeping one's own mobile is fine
    updated = service.update_student(SUPERADMIN, first.student_id, {"mobile": first.mobile, "city": "Pune"})
    assert updated.city == "Pune"


def test_update_unknown_student_is_not_found(service):
    with pytest.raises(NotFoundError):
        service.update_student(SUPERADMIN, 404, {"city": "Pune"})


def test_list_is_forced_to_own_section_for_section_admin_and_student(service, make_student):
    make_student(section=Section.A)
    make_student(section=Section.B)
    make_student(section=Section.B)

    assert len(service.list_students(SUPERADMIN)) == 3
    assert len(service.list_students(SUPERADMIN, section="A")) == 1
    assert {s.section for s in service.list_students(ADMIN_B, section="A")} == {Section.B}

    student_user = SessionUser(user_id=9, username="x", role=Role.STUDENT, section=Section.A, student_id=1)
    assert len(service.list_students(student_user)) == 1


def test_list_search_and_pagination(service, make_student):
    make_student(first_name="Anil", city="Delhi")
    make_student(first_name="Bela", city="Pune")
    make_student(first_name="Chitra", city="Pune")

    assert [s.first_name for s in service.list_students(SUPERADMIN, search="PUNE")] == ["Bela", "Chitra"]
    assert [s.first_name for s in service.list_students(SUPERADMIN, limit="1", offset="1")] == ["Bela"]


def test_student_can_only_read_own_record(service, make_student):
    mine = make_student()
    other = make_student()
    me = SessionUser(user_id=5, username=mine.mobile, role=Role.STUDENT, section=Section.A, student_id=mine.student_id)

    assert service.get_student(me, mine.student_id) == mine
    with pytest.raises(AuthorizationError):
        service.get_student(me, other.student_id)


def test_only_superadmin_deletes(service, make_student):
    s = make_student(section=Section.B)
    with pytest.raises(AuthorizationError):
        service.delete_student(ADMIN_B, s.student_id)

    service.delete_student(SUPERADMIN, s.student_id)
    with pytest.raises(NotFoundError):
        service.delete_student(SUPERADMIN, s.student_id)


def test_bulk_import_upserts_by_mobile(service, store, students, make_student):
    existing = make_student(first_name="Old", mobile="9800000001")
    ledger = InMemoryContributionRepository(store)
    ledger.create(student_id=existing.student_id, amount=500, date=date(2025, 1, 1))

    records = [
        NewStudent(first_name="New", last_name="Name", section=Section.A, gender=Gender.MALE, mobile="9800000001"),
        NewStudent(first_name="Fresh", last_name="One", section=Section.C, gender=Gender.FEMALE, mobile="9800000002"),
    ]

    result = service.bulk_import(records)

    assert [s.mobile for s in result.students] == ["9800000001", "9800000002"]
    updated, created = result.students
    assert updated.student_id == existing.student_id
    assert updated.first_name == "New"
    # import never overwrites the ledger-derived total
    assert updated.contribution_amount == 500
    assert created.student_id != existing.student_id
    assert created.contribution_amount == 0
    assert result.skipped == []
    assert len(students.list_students()) == 2


def test_bulk_import_skips_failing_record_and_keeps_earlier_ones(students):
    class FlakyRepo:
        """Delegates to the real repository but fails on one mobile."""

        def __init__(self, inner):
            self._inner = inner

        def get_by_mobile(self, mobile):
            return self._inner.get_by_mobile(mobile)

        def create(self, data):
            if data.mobile == "bad":
                raise RuntimeError("disk full")
            return self._inner.create(data)

        def update(self, student_id, changes):
            return self._inner.update(student_id, changes)

    service = StudentService(FlakyRepo(students))
    records = [
        NewStudent(first_name="A", last_name="A", section=Section.A, gender=Gender.OTHER, mobile="1"),
        NewStudent(first_name="B", last_name="B", section=Section.A, gender=Gender.OTHER, mobile="bad"),
        NewStudent(first_name="C", last_name="C", section=Section.A, gender=Gender.OTHER, mobile="3"),
    ]

    result = service.bulk_import(records)

    assert [s.mobile for s in result.students] == ["1", "3"]
    assert result.skipped == [{"row": 2, "mobile": "bad", "reason": "disk full"}]
    assert students.get_by_mobile("1") is not None
