from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import optional_int, require_enum, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.enums import Role, Section
from ..core.exceptions import AuthenticationError, AuthorizationError, NotFoundError, ValidationError
from ..students.repository import StudentRepository
from .model import SessionUser, User
from .repository import UserRepository

logger = logging.getLogger(__name__)


class AuthService:
    """Use case: authenticate user (login)."""

    def __init__(self, users: UserRepository):
        self._users = users

    def authenticate(self, username: str, password: str) -> SessionUser:
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self._users.get_by_username(str(username).strip())
        if not user:
            raise AuthenticationError("Invalid credentials")

        try:
            ok = check_password_hash(user.password_hash, str(password))
        except ValueError:
            # unknown hash method, e.g. a placeholder value written by hand
            ok = False

        if not ok:
            raise AuthenticationError("Invalid credentials")

        return SessionUser.from_user(user)


class UserService:
    """Use case: manage accounts (registration, listing, removal)."""

    def __init__(self, users: UserRepository, students: StudentRepository):
        self._users = users
        self._students = students

    def register(self, actor: Optional[SessionUser], payload: Mapping[str, Any]) -> User:
        """Create an account.

        Admin accounts can only be created by a superadmin. A student account
        is bound to an existing attendee: its username and initial password are
        the attendee's mobile number and its section is the attendee's section.
        """
        role = require_enum(payload.get("role") or Role.STUDENT.value, Role, "Role")

        if role.is_admin:
            if not actor or actor.role != Role.SUPERADMIN:
                raise AuthorizationError("Only superadmin can create admin accounts")

            username = require_non_empty(payload.get("username"), "Username")
            password = require_min_length(str(payload.get("password") or ""), "Password", MIN_PASSWORD_LENGTH)
            section = None
            if role == Role.SECTION_ADMIN:
                section = require_enum(payload.get("section"), Section, "Section")
            student_id = None
        else:
            raw_student_id = payload.get("studentId", payload.get("student_id"))
            student_id = optional_int(raw_student_id, "Student id", minimum=1)
            if student_id is None:
                raise ValidationError("Student ID is required for student accounts")

            student = self._students.get_by_id(student_id)
            if not student:
                raise NotFoundError("Student not found")
            if self._users.get_by_student_id(student_id):
                raise ValidationError("Student already has an account")

            username = student.mobile
            password = student.mobile
            section = student.section

        if self._users.get_by_username(username):
            raise ValidationError("Username already exists")

        user = self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=role,
            section=section,
            student_id=student_id,
        )
        logger.info("Registered %s account %s", role.value, username)
        return user

    def ensure_default_admin(self, username: str, password: str) -> bool:
        """Seed the first superadmin account if it does not exist yet."""
        if self._users.get_by_username(username):
            return False

        self._users.create_user(
            username=username,
            password_hash=generate_password_hash(password),
            role=Role.SUPERADMIN,
        )
        logger.info("Default superadmin %s created", username)
        return True

    def list_users(self, actor: SessionUser) -> Sequence[User]:
        if actor.role != Role.SUPERADMIN:
            raise AuthorizationError("Superadmin privileges required")
        return self._users.list_users()

    def delete_user(self, actor: SessionUser, user_id: int) -> None:
        if actor.role != Role.SUPERADMIN:
            raise AuthorizationError("Superadmin privileges required")
        if int(user_id) == actor.user_id:
            raise ValidationError("You cannot delete your own account")

        if not self._users.delete_by_id(int(user_id)):
            raise NotFoundError("User not found")
