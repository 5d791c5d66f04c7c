from __future__ import annotations

from dataclasses import replace
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import now_local
from ..database.memory_store import InMemoryStore
from .model import EDITABLE_FIELDS, NewStudent, Student, StudentQuery
from .repository import StudentRepository

TABLE = "students"


def _matches(student: Student, term: str) -> bool:
    haystack = [student.first_name, student.last_name, student.mobile, student.email or "", student.city or ""]
    return any(term in value.lower() for value in haystack)


class InMemoryStudentRepository(StudentRepository):
    def __init__(self, store: InMemoryStore):
        self._store = store

    @property
    def _rows(self) -> dict[int, Student]:
        return self._store.table(TABLE)

    def get_by_id(self, student_id: int) -> Optional[Student]:
        return self._rows.get(int(student_id))

    def get_by_mobile(self, mobile: str) -> Optional[Student]:
        with self._store.lock:
            return next((s for s in self._rows.values() if s.mobile == mobile), None)

    def list_students(self, query: StudentQuery = StudentQuery()) -> Sequence[Student]:
        with self._store.lock:
            items = list(self._rows.values())

        if query.section is not None:
            items = [s for s in items if s.section == query.section]
        if query.search:
            term = query.search.lower()
            items = [s for s in items if _matches(s, term)]

        items.sort(key=lambda s: (s.first_name, s.student_id))

        if query.limit is not None:
            start = query.offset or 0
            items = items[start : start + query.limit]
        return items

    def create(self, data: NewStudent) -> Student:
        with self._store.lock:
            student = Student(
                student_id=self._store.next_id(TABLE),
                contribution_amount=0,
                created_at=now_local(),
                **data.as_changes(),
            )
            self._rows[student.student_id] = student
            return student

    def update(self, student_id: int, changes: Mapping[str, Any]) -> Optional[Student]:
        allowed = {k: v for k, v in changes.items() if k in EDITABLE_FIELDS}
        with self._store.lock:
            current = self._rows.get(int(student_id))
            if not current:
                return None
            updated = replace(current, **allowed)
            self._rows[current.student_id] = updated
            return updated

    def delete_by_id(self, student_id: int) -> bool:
        with self._store.lock:
            removed = self._rows.pop(int(student_id), None)
            if removed is None:
                return False
            # same foreign key behaviour as schema.sql: contributions cascade,
            # linked accounts keep existing with student_id cleared
            ledger = self._store.table("contributions")
            for cid in [cid for cid, c in ledger.items() if c.student_id == removed.student_id]:
                del ledger[cid]
            users = self._store.table("users")
            for uid, user in list(users.items()):
                if user.student_id == removed.student_id:
                    users[uid] = replace(user, student_id=None)
            return True
