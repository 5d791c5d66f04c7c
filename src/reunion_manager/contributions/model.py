from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Optional


@dataclass(frozen=True)
class Contribution:
    """One ledger entry: money received from an attendee.

    The sum of an attendee's entries is mirrored in Student.contribution_amount.
    """

    contribution_id: int
    student_id: int
    amount: int
    date: date
    recorded_by: Optional[int] = None
    created_at: Optional[datetime] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.contribution_id,
            "studentId": self.student_id,
            "amount": self.amount,
            "date": self.date.isoformat(),
            "recordedBy": self.recorded_by,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }


@dataclass(frozen=True)
class ContributionQuery:
    student_id: Optional[int] = None
    limit: Optional[int] = None
    offset: Optional[int] = None
