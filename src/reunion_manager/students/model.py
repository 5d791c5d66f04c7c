from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any, Optional

from ..core.enums import AttendingStatus, Gender, PaidStatus, Section

# Fields a caller may set through create/update/import.
# contribution_amount is deliberately absent: only the contribution ledger writes it.
EDITABLE_FIELDS = (
    "first_name",
    "last_name",
    "section",
    "gender",
    "mobile",
    "email",
    "dob",
    "city",
    "work",
    "attending_status",
    "paid_status",
)


@dataclass(frozen=True)
class Student:
    """Domain entity: a reunion attendee.

    contribution_amount is a running total cached from the contribution ledger.
    """

    student_id: int
    first_name: str
    last_name: str
    section: Section
    gender: Gender
    mobile: str
    email: Optional[str] = None
    dob: Optional[date] = None
    city: Optional[str] = None
    work: Optional[str] = None
    attending_status: AttendingStatus = AttendingStatus.NOT_CONFIRMED
    paid_status: PaidStatus = PaidStatus.NOT_PAID
    contribution_amount: int = 0
    created_at: Optional[datetime] = None

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.student_id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "fullName": self.full_name,
            "section": self.section.value,
            "gender": self.gender.value,
            "mobile": self.mobile,
            "email": self.email,
            "dob": self.dob.isoformat() if self.dob else None,
            "city": self.city,
            "work": self.work,
            "attendingStatus": self.attending_status.value,
            "paidStatus": self.paid_status.value,
            "contributionAmount": self.contribution_amount,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class NewStudent:
    """Validated input for creating a student."""

    first_name: str
    last_name: str
    section: Section
    gender: Gender
    mobile: str
    email: Optional[str] = None
    dob: Optional[date] = None
    city: Optional[str] = None
    work: Optional[str] = None
    attending_status: AttendingStatus = AttendingStatus.NOT_CONFIRMED
    paid_status: PaidStatus = PaidStatus.NOT_PAID

    def as_changes(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in EDITABLE_FIELDS}


@dataclass(frozen=True)
class StudentQuery:
    section: Optional[Section] = None
    search: Optional[str] = None
    limit: Optional[int] = None
    offset: Optional[int] = None


@dataclass(frozen=True)
class ImportResult:
    students: list[Student] = field(default_factory=list)
    skipped: list[dict] = field(default_factory=list)
