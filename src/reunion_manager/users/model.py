from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from ..core.enums import Role, Section


@dataclass(frozen=True)
class User:
    """Domain entity: a login account.

    Plain data object, no DB access. student_id links a student account
    to the attendee it was registered for.
    """

    user_id: int
    username: str
    password_hash: str
    role: Role
    section: Optional[Section] = None
    student_id: Optional[int] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "section": self.section.value if self.section else None,
            "studentId": self.student_id,
        }


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    username: str
    role: Role
    section: Optional[Section] = None
    student_id: Optional[int] = None

    @classmethod
    def from_user(cls, user: User) -> "SessionUser":
        return cls(
            user_id=user.user_id,
            username=user.username,
            role=user.role,
            section=user.section,
            student_id=user.student_id,
        )

    def to_session(self) -> dict[str, Any]:
        return {
            "user_id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "section": self.section.value if self.section else None,
            "student_id": self.student_id,
        }

    @classmethod
    def from_session(cls, data: Any) -> Optional["SessionUser"]:
        if "user_id" not in data:
            return None
        section = data.get("section")
        return cls(
            user_id=int(data["user_id"]),
            username=data.get("username", ""),
            role=Role(data["role"]),
            section=Section(section) if section else None,
            student_id=data.get("student_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.user_id,
            "username": self.username,
            "role": self.role.value,
            "section": self.section.value if self.section else None,
            "studentId": self.student_id,
        }
