from __future__ import annotations

import logging
from typing import Any, BinaryIO, Iterable, Mapping, Optional, Sequence

from ..common.validators import (
    optional_date,
    optional_int,
    optional_text,
    require_enum,
    require_non_empty,
)
from ..core.enums import AttendingStatus, Gender, PaidStatus, Role, Section
from ..core.exceptions import AuthorizationError, NotFoundError, ValidationError
from ..users.model import SessionUser
from .importer import read_student_rows
from .model import ImportResult, NewStudent, Student, StudentQuery
from .repository import StudentRepository

logger = logging.getLogger(__name__)

# JSON key (camelCase, as sent by the client) -> domain field
_FIELD_KEYS = {
    "first_name": ("firstName", "first_name"),
    "last_name": ("lastName", "last_name"),
    "section": ("section",),
    "gender": ("gender",),
    "mobile": ("mobile",),
    "email": ("email",),
    "dob": ("dob",),
    "city": ("city",),
    "work": ("work",),
    "attending_status": ("attendingStatus", "attending_status"),
    "paid_status": ("paidStatus", "paid_status"),
}


def _pick(payload: Mapping[str, Any], field: str) -> tuple[bool, Any]:
    for key in _FIELD_KEYS[field]:
        if key in payload:
            return True, payload[key]
    return False, None


def _clean_field(field: str, value: Any) -> Any:
    if field in {"first_name", "last_name"}:
        return require_non_empty(value, field.replace("_", " ").capitalize())
    if field == "mobile":
        return require_non_empty(value, "Mobile")
    if field == "section":
        return require_enum(value, Section, "Section")
    if field == "gender":
        return require_enum(value, Gender, "Gender")
    if field == "attending_status":
        return require_enum(value, AttendingStatus, "Attending status")
    if field == "paid_status":
        return require_enum(value, PaidStatus, "Paid status")
    if field == "dob":
        return optional_date(value, "Date of birth")
    return optional_text(value)


def parse_new_student(payload: Mapping[str, Any]) -> NewStudent:
    values: dict[str, Any] = {}
    for field in _FIELD_KEYS:
        present, raw = _pick(payload, field)
        if not present or raw is None:
            continue
        values[field] = _clean_field(field, raw)

    for required in ("first_name", "last_name", "section", "gender", "mobile"):
        if required not in values:
            raise ValidationError(f"{required.replace('_', ' ').capitalize()} is required")

    return NewStudent(**values)


def parse_student_changes(payload: Mapping[str, Any]) -> dict[str, Any]:
    """Partial update: only keys present in the payload are validated and returned."""
    changes: dict[str, Any] = {}
    for field in _FIELD_KEYS:
        present, raw = _pick(payload, field)
        if present:
            changes[field] = _clean_field(field, raw)
    return changes


class StudentService:
    """Use cases around attendees, scoped by the caller's role and section."""

    def __init__(self, students: StudentRepository):
        self._students = students

    @staticmethod
    def _require_admin(actor: SessionUser) -> None:
        if not actor.role.is_admin:
            raise AuthorizationError("Admin privileges required")

    @staticmethod
    def _check_read_access(actor: SessionUser, student: Student) -> None:
        if actor.role == Role.SECTION_ADMIN and student.section != actor.section:
            raise AuthorizationError("You can only access students in your section")
        if actor.role == Role.STUDENT and actor.student_id != student.student_id:
            raise AuthorizationError("You can only access your own data")

    def list_students(
        self,
        actor: SessionUser,
        *,
        section: Optional[str] = None,
        search: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> Sequence[Student]:
        section_filter = require_enum(section, Section, "Section") if section else None
        # Section admins and students only ever see their own section.
        if actor.role in {Role.SECTION_ADMIN, Role.STUDENT}:
            section_filter = actor.section

        query = StudentQuery(
            section=section_filter,
            search=optional_text(search),
            limit=optional_int(limit, "Limit", minimum=0),
            offset=optional_int(offset, "Offset", minimum=0),
        )
        return self._students.list_students(query)

    def get_student(self, actor: SessionUser, student_id: int) -> Student:
        student = self._students.get_by_id(int(student_id))
        if not student:
            raise NotFoundError("Student not found")
        self._check_read_access(actor, student)
        return student

    def create_student(self, actor: SessionUser, payload: Mapping[str, Any]) -> Student:
        self._require_admin(actor)
        data = parse_new_student(payload)

        if actor.role == Role.SECTION_ADMIN and data.section != actor.section:
            raise AuthorizationError("You can only add students to your section")
        if self._students.get_by_mobile(data.mobile):
            raise ValidationError("Student with this mobile number already exists")

        return self._students.create(data)

    def update_student(self, actor: SessionUser, student_id: int, payload: Mapping[str, Any]) -> Student:
        self._require_admin(actor)

        existing = self._students.get_by_id(int(student_id))
        if not existing:
            raise NotFoundError("Student not found")

        if actor.role == Role.SECTION_ADMIN:
            if existing.section != actor.section:
                raise AuthorizationError("You can only update students in your section")

        changes = parse_student_changes(payload)
        if actor.role == Role.SECTION_ADMIN and changes.get("section", actor.section) != actor.section:
            raise AuthorizationError("You cannot change students to a different section")

        new_mobile = changes.get("mobile")
        if new_mobile and new_mobile != existing.mobile:
            other = self._students.get_by_mobile(new_mobile)
            if other and other.student_id != existing.student_id:
                raise ValidationError("Another student with this mobile number already exists")

        updated = self._students.update(existing.student_id, changes)
        if not updated:
            raise NotFoundError("Student not found")
        return updated

    def delete_student(self, actor: SessionUser, student_id: int) -> None:
        if actor.role != Role.SUPERADMIN:
            raise AuthorizationError("Superadmin privileges required")
        if not self._students.delete_by_id(int(student_id)):
            raise NotFoundError("Student not found")

    def bulk_import(self, records: Iterable[NewStudent]) -> ImportResult:
        """Upsert attendees keyed by mobile number, in input order.

        Each record is written on its own; a failure on one record is reported
        in `skipped` and does not undo the records before it.
        """
        result = ImportResult()
        for index, record in enumerate(records):
            try:
                existing = self._students.get_by_mobile(record.mobile)
                if existing:
                    student = self._students.update(existing.student_id, record.as_changes())
                else:
                    student = self._students.create(record)
            except Exception as e:
                logger.warning("Import of mobile %s failed: %s", record.mobile, e)
                result.skipped.append({"row": index + 1, "mobile": record.mobile, "reason": str(e)})
                continue
            if student:
                result.students.append(student)
        return result

    def import_file(self, actor: SessionUser, stream: BinaryIO, filename: str) -> ImportResult:
        self._require_admin(actor)

        records: list[NewStudent] = []
        skipped: list[dict] = []
        for row_number, row in read_student_rows(stream, filename):
            try:
                record = parse_new_student(row)
            except ValidationError as e:
                skipped.append({"row": row_number, "mobile": row.get("mobile"), "reason": str(e)})
                continue
            if actor.role == Role.SECTION_ADMIN and record.section != actor.section:
                continue
            records.append(record)

        if not records:
            raise ValidationError("No valid student data found in the file")

        result = self.bulk_import(records)
        return ImportResult(students=result.students, skipped=skipped + result.skipped)
