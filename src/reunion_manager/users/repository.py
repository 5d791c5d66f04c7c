from __future__ import annotations

from typing import Optional, Protocol, Sequence

from ..core.enums import Role, Section
from .model import User


class UserRepository(Protocol):
    """Repository interface for login accounts.

    Services depend on this interface, not on a concrete store.
    """

    def get_by_id(self, user_id: int) -> Optional[User]:
        raise NotImplementedError

    def get_by_username(self, username: str) -> Optional[User]:
        raise NotImplementedError

    def get_by_student_id(self, student_id: int) -> Optional[User]:
        raise NotImplementedError

    def create_user(
        self,
        *,
        username: str,
        password_hash: str,
        role: Role,
        section: Optional[Section] = None,
        student_id: Optional[int] = None,
    ) -> User:
        raise NotImplementedError

    def list_users(self) -> Sequence[User]:
        raise NotImplementedError

    def delete_by_id(self, user_id: int) -> bool:
        raise NotImplementedError
