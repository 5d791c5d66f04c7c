from __future__ import annotations

import pytest
from werkzeug.security import generate_password_hash

from reunion_manager.core.enums import Role, Section
from reunion_manager.core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from reunion_manager.users.memory_user_repository import InMemoryUserRepository
from reunion_manager.users.model import SessionUser
from reunion_manager.users.service import AuthService, UserService

SUPERADMIN = SessionUser(user_id=1, username="admin", role=Role.SUPERADMIN)


@pytest.fixture
def users(store):
    return InMemoryUserRepository(store)


@pytest.fixture
def user_service(users, students):
    return UserService(users, students)


def test_authenticate_returns_session_user(users):
    users.create_user(
        username="alice",
        password_hash=generate_password_hash("secret1"),
        role=Role.SECTION_ADMIN,
        section=Section.C,
    )

    s_user = AuthService(users).authenticate("alice", "secret1")

    assert s_user.username == "alice"
    assert s_user.role == Role.SECTION_ADMIN
    assert s_user.section == Section.C


@pytest.mark.parametrize("username,password", [("alice", "wrong"), ("nobody", "secret1")])
def test_authenticate_rejects_bad_credentials(users, username, password):
    users.create_user(username="alice", password_hash=generate_password_hash("secret1"), role=Role.SUPERADMIN)
    with pytest.raises(AuthenticationError):
        AuthService(users).authenticate(username, password)


def test_authenticate_treats_placeholder_hash_as_wrong_password(users):
    users.create_user(username="legacy", password_hash="CHANGE_ME", role=Role.SUPERADMIN)
    with pytest.raises(AuthenticationError):
        AuthService(users).authenticate("legacy", "CHANGE_ME")


def test_default_admin_is_seeded_once(user_service, users):
    assert user_service.ensure_default_admin("admin", "admin123") is True
    assert user_service.ensure_default_admin("admin", "admin123") is False

    admin = users.get_by_username("admin")
    assert admin.role == Role.SUPERADMIN
    assert AuthService(users).authenticate("admin", "admin123").user_id == admin.user_id


def test_only_superadmin_registers_admins(user_service):
    payload = {"username": "sec-b", "password": "secret1", "role": "section_admin", "section": "B"}

    with pytest.raises(AuthorizationError):
        user_service.register(None, payload)

    user = user_service.register(SUPERADMIN, payload)
    assert user.role == Role.SECTION_ADMIN
    assert user.section == Section.B


def test_admin_registration_validates_password_and_duplicates(user_service):
    with pytest.raises(ValidationError):
        user_service.register(SUPERADMIN, {"username": "x", "password": "123", "role": "superadmin"})

    user_service.register(SUPERADMIN, {"username": "x", "password": "secret1", "role": "superadmin"})
    with pytest.raises(ValidationError):
        user_service.register(SUPERADMIN, {"username": "x", "password": "secret1", "role": "superadmin"})


def test_student_account_uses_mobile_and_section(user_service, users, make_student):
    s = make_student(section=Section.D, mobile="9876543210")

    user = user_service.register(None, {"role": "student", "studentId": s.student_id, "username": "ignored"})

    assert user.username == "9876543210"
    assert user.section == Section.D
    assert user.student_id == s.student_id
    assert AuthService(users).authenticate("9876543210", "9876543210").student_id == s.student_id


def test_student_gets_at_most_one_account(user_service, make_student):
    s = make_student()
    user_service.register(None, {"role": "student", "studentId": s.student_id})
    with pytest.raises(ValidationError):
        user_service.register(None, {"role": "student", "studentId": s.student_id})


def test_student_account_needs_existing_student(user_service):
    with pytest.raises(ValidationError):
        user_service.register(None, {"role": "student"})
    with pytest.raises(NotFoundError):
        user_service.register(None, {"role": "student", "studentId": 42})


def test_superadmin_cannot_delete_self(user_service, users):
    admin = users.create_user(username="root", password_hash="x", role=Role.SUPERADMIN)
    me = SessionUser.from_user(admin)

    with pytest.raises(ValidationError):
        user_service.delete_user(me, admin.user_id)
    with pytest.raises(NotFoundError):
        user_service.delete_user(me, 999)
