from __future__ import annotations

from typing import Any, Mapping, Optional, Protocol, Sequence

from .model import NewStudent, Student, StudentQuery


class StudentRepository(Protocol):
    """Repository interface for attendees.

    update() only accepts keys from model.EDITABLE_FIELDS; the contribution
    total is maintained by ContributionRepository.
    """

    def get_by_id(self, student_id: int) -> Optional[Student]:
        raise NotImplementedError

    def get_by_mobile(self, mobile: str) -> Optional[Student]:
        raise NotImplementedError

    def list_students(self, query: StudentQuery = StudentQuery()) -> Sequence[Student]:
        raise NotImplementedError

    def create(self, data: NewStudent) -> Student:
        raise NotImplementedError

    def update(self, student_id: int, changes: Mapping[str, Any]) -> Optional[Student]:
        raise NotImplementedError

    def delete_by_id(self, student_id: int) -> bool:
        raise NotImplementedError
