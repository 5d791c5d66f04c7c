from __future__ import annotations

from typing import Optional, Sequence

from ..core.enums import Role, Section
from ..database.memory_store import InMemoryStore
from .model import User
from .repository import UserRepository

TABLE = "users"


class InMemoryUserRepository(UserRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, User]:
        return self._store.table(TABLE)

    def get_by_id(self, user_id: int) -> Optional[User]:
        return self._rows.get(int(user_id))

    def get_by_username(self, username: str) -> Optional[User]:
        with self._store.lock:
            return next((u for u in self._rows.values() if u.username == username), None)

    def get_by_student_id(self, student_id: int) -> Optional[User]:
        with self._store.lock:
            return next((u for u in self._rows.values() if u.student_id == int(student_id)), None)

    def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        role: Role,
        section: Optional[Section] = None,
        student_id: Optional[int] = None,
    ) -> User:
        with self._store.lock:
            user = User(
                user_id=self._store.next_id(TABLE),
                username=username,
                password_hash=password_hash,
                role=role,
                section=section,
                student_id=student_id,
            )
            self._rows[user.user_id] = user
            return user

    def list_users(self) -> Sequence[User]:
        with self._store.lock:
            return sorted(self._rows.values(), key=lambda u: u.user_id)

    def delete_by_id(self, user_id: int) -> bool:
        with self._store.lock:
            return self._rows.pop(int(user_id), None) is not None
