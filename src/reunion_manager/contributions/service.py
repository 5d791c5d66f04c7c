from __future__ import annotations

import logging
from typing import Any, Mapping, Optional, Sequence

from ..common.datetime_utils import today_local
from ..common.validators import optional_date, optional_int, optional_text, require_positive_int
from ..core.exceptions import NotFoundError, ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from ..users.model import SessionUser
from .model import Contribution, ContributionQuery
from .repository import ContributionRepository

logger = logging.getLogger(__name__)


def _matches(student: Student, term: str) -> bool:
    return (
        term in student.full_name.lower()
        or term in student.section.value.lower()
        or term in student.mobile.lower()
    )


class ContributionService:
    """Use cases over the contribution ledger."""

    def __init__(self, contributions: ContributionRepository, students: StudentRepository):
        self._contributions = contributions
        self._students = students

    def list_contributions(
        self,
        *,
        student_id: Any = None,
        limit: Any = None,
        offset: Any = None,
    ) -> Sequence[Contribution]:
        query = ContributionQuery(
            student_id=optional_int(student_id, "Student id", minimum=1),
            limit=optional_int(limit, "Limit", minimum=0),
            offset=optional_int(offset, "Offset", minimum=0),
        )
        return self._contributions.list_contributions(query)

    def list_with_students(
        self,
        *,
        student_id: Any = None,
        search: Optional[str] = None,
        limit: Any = None,
        offset: Any = None,
    ) -> list[dict[str, Any]]:
        """Contributions with the owning student embedded under "student".

        The search term matches full name, section or mobile (case-insensitive)
        and is applied before limit/offset.
        """
        limit = optional_int(limit, "Limit", minimum=0)
        offset = optional_int(offset, "Offset", minimum=0)
        term = (optional_text(search) or "").lower()

        contributions = self.list_contributions(student_id=student_id)
        cache: dict[int, Optional[Student]] = {}

        rows: list[dict[str, Any]] = []
        for contribution in contributions:
            if contribution.student_id not in cache:
                cache[contribution.student_id] = self._students.get_by_id(contribution.student_id)
            student = cache[contribution.student_id]

            if term and (student is None or not _matches(student, term)):
                continue

            row = contribution.to_dict()
            if student is not None:
                row["student"] = student.to_dict()
            rows.append(row)

        if limit is not None:
            start = offset or 0
            rows = rows[start : start + limit]
        return rows

    def get_contribution(self, contribution_id: int) -> Contribution:
        contribution = self._contributions.get(int(contribution_id))
        if not contribution:
            raise NotFoundError("Contribution not found")
        return contribution

    def create_contribution(self, actor: SessionUser, payload: Mapping[str, Any]) -> Contribution:
        student_id = require_positive_int(payload.get("studentId", payload.get("student_id")), "Student id")
        amount = require_positive_int(payload.get("amount"), "Amount")
        contribution_date = optional_date(payload.get("date"), "Date") or today_local()

        contribution = self._contributions.create(
            student_id=student_id,
            amount=amount,
            date=contribution_date,
            recorded_by=actor.user_id,
        )
        logger.info(
            "Contribution %s of %s recorded for student %s by %s",
            contribution.contribution_id,
            amount,
            student_id,
            actor.username,
        )
        return contribution

    def update_contribution(self, contribution_id: int, payload: Mapping[str, Any]) -> Contribution:
        amount = None
        if payload.get("amount") is not None:
            amount = require_positive_int(payload.get("amount"), "Amount")
        contribution_date = optional_date(payload.get("date"), "Date")

        if "studentId" in payload or "student_id" in payload:
            current = self.get_contribution(contribution_id)
            requested = payload.get("studentId", payload.get("student_id"))
            if requested is not None and optional_int(requested, "Student id") != current.student_id:
                raise ValidationError("A contribution cannot be moved to another student")

        updated = self._contributions.update(int(contribution_id), amount=amount, date=contribution_date)
        if not updated:
            raise NotFoundError("Contribution not found")
        return updated

    def delete_contribution(self, contribution_id: int) -> None:
        if not self._contributions.delete(int(contribution_id)):
            raise NotFoundError("Contribution not found")

    def total_amount(self) -> int:
        return self._contributions.total_amount()

    def recalculate_student_totals(self) -> int:
        return self._contributions.recalculate_student_totals()
