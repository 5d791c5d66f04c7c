from __future__ import annotations

from enum import Enum


class Role(str, Enum):
    """User roles used for authorization."""

    SUPERADMIN = "superadmin"
    SECTION_ADMIN = "section_admin"
    STUDENT = "student"

    @property
    def is_admin(self) -> bool:
        return self in {Role.SUPERADMIN, Role.SECTION_ADMIN}


class Section(str, Enum):
    A = "A"
    B = "B"
    C = "C"
    D = "D"


class Gender(str, Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class AttendingStatus(str, Enum):
    """Whether an attendee has confirmed coming to the reunion."""

    ATTENDING = "attending"
    NOT_ATTENDING = "not_attending"
    NOT_CONFIRMED = "not_confirmed"


class PaidStatus(str, Enum):
    PAID = "paid"
    PENDING = "pending"
    NOT_PAID = "not_paid"
    NOT_APPLICABLE = "not_applicable"


class ExpenseCategory(str, Enum):
    """Category vocabulary shared by expenses and budget items."""

    VENUE = "venue"
    FOOD = "food"
    ENTERTAINMENT = "entertainment"
    DECORATION = "decoration"
    TRANSPORTATION = "transportation"
    GIFTS = "gifts"
    TECHNOLOGY = "technology"
    MARKETING = "marketing"
    MISCELLANEOUS = "miscellaneous"


class CategoryType(str, Enum):
    EXPENSE = "expense"
    BUDGET = "budget"
    BOTH = "both"
