from __future__ import annotations

from typing import Any, Mapping, Optional, Sequence

from ..core.enums import Role, Section
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import User
from .repository import UserRepository

_SELECT = "SELECT user_id, username, password_hash, role, section, student_id FROM users"


def _row_to_user(row: Mapping[str, Any]) -> User:
    section = row.get("section")
    student_id = row.get("student_id")
    return User(
        user_id=int(row["user_id"]),
        username=row["username"],
        password_hash=row["password_hash"],
        role=Role(row["role"]),
        section=Section(section) if section else None,
        student_id=int(student_id) if student_id is not None else None,
    )


class MySQLUserRepository(UserRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def _get_one(self, where: str, value: Any) -> Optional[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE {where}=%s", (value,))
            row = fetchone(cur)
            return _row_to_user(row) if row else None

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._get_one("user_id", int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        return self._get_one("username", username)

    def get_by_student_id(self, student_id: int) -> Optional[User]:
        return self._get_one("student_id", int(student_id))

    def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        role: Role,
        section: Optional[Section] = None,
        student_id: Optional[int] = None,
    ) -> User:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                INSERT INTO users(username, password_hash, role, section, student_id)
                VALUES(%s,%s,%s,%s,%s)
                """,
                (username, password_hash, role.value, section.value if section else None, student_id),
            )
            new_id = int(cur.lastrowid)
        return User(
            user_id=new_id,
            username=username,
            password_hash=password_hash,
            role=role,
            section=section,
            student_id=student_id,
        )

    def list_users(self) -> Sequence[User]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} ORDER BY user_id")
            return [_row_to_user(r) for r in fetchall(cur)]

    def delete_by_id(self, user_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM users WHERE user_id=%s", (int(user_id),))
            return cur.rowcount > 0
