from __future__ import annotations

import logging
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import PaidStatus
from ..core.exceptions import NotFoundError
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchall, fetchone, paginate_clause
from .model import Contribution, ContributionQuery
from .repository import ContributionRepository

logger = logging.getLogger(__name__)

_SELECT = "SELECT contribution_id, student_id, amount, date, recorded_by, created_at FROM contributions"


def _row_to_contribution(r: Mapping[str, Any]) -> Contribution:
    recorded_by = r.get("recorded_by")
    return Contribution(
        contribution_id=int(r["contribution_id"]),
        student_id=int(r["student_id"]),
        amount=int(r["amount"]),
        date=r["date"],
        recorded_by=int(recorded_by) if recorded_by is not None else None,
        created_at=r.get("created_at"),
    )


class MySQLContributionRepository(ContributionRepository):
    """Ledger writes run in a single transaction with the student row locked
    (SELECT ... FOR UPDATE), and totals move by in-place increments, so
    concurrent writers for the same student cannot lose updates.
    """

    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get(self, contribution_id: int) -> Optional[Contribution]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE contribution_id=%s", (int(contribution_id),))
            r = fetchone(cur)
            return _row_to_contribution(r) if r else None

    def list_contributions(self, query: ContributionQuery = ContributionQuery()) -> Sequence[Contribution]:
        where = ""
        params: list[object] = []
        if query.student_id is not None:
            where = " WHERE student_id=%s"
            params.append(int(query.student_id))

        page_sql, page_params = paginate_clause(query.limit, query.offset)
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"{_SELECT}{where} ORDER BY date DESC, contribution_id DESC{page_sql}",
                tuple(params + list(page_params)),
            )
            return [_row_to_contribution(r) for r in fetchall(cur)]

    def create(
        self,
        *,
        student_id: int,
        amount: int,
        date: date,
        recorded_by: Optional[int] = None,
    ) -> Contribution:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT student_id, paid_status FROM students WHERE student_id=%s FOR UPDATE",
                (int(student_id),),
            )
            student = fetchone(cur)
            if not student:
                raise NotFoundError("Student not found")

            cur.execute(
                "INSERT INTO contributions(student_id, amount, date, recorded_by) VALUES(%s,%s,%s,%s)",
                (int(student_id), int(amount), date, recorded_by),
            )
            new_id = int(cur.lastrowid)

            cur.execute("SELECT COUNT(*) AS n FROM contributions WHERE student_id=%s", (int(student_id),))
            count = int(fetchone(cur)["n"])

            if count == 1 and student["paid_status"] != PaidStatus.PAID.value:
                cur.execute(
                    """
                    UPDATE students
                    SET contribution_amount = contribution_amount + %s, paid_status=%s
                    WHERE student_id=%s
                    """,
                    (int(amount), PaidStatus.PAID.value, int(student_id)),
                )
            else:
                cur.execute(
                    "UPDATE students SET contribution_amount = contribution_amount + %s WHERE student_id=%s",
                    (int(amount), int(student_id)),
                )

            cur.execute(f"{_SELECT} WHERE contribution_id=%s", (new_id,))
            return _row_to_contribution(fetchone(cur))

    def update(
        self,
        contribution_id: int,
        *,
        amount: Optional[int] = None,
        date: Optional[date] = None,
    ) -> Optional[Contribution]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE contribution_id=%s FOR UPDATE", (int(contribution_id),))
            r = fetchone(cur)
            if not r:
                return None
            current = _row_to_contribution(r)

            changes: dict[str, Any] = {}
            delta = 0
            if amount is not None and int(amount) != current.amount:
                changes["amount"] = int(amount)
                delta = int(amount) - current.amount
            if date is not None:
                changes["date"] = date

            if changes:
                set_sql, values = build_set_clause(changes)
                cur.execute(
                    f"UPDATE contributions SET {set_sql} WHERE contribution_id=%s",
                    tuple(values) + (current.contribution_id,),
                )
            if delta:
                cur.execute(
                    "UPDATE students SET contribution_amount = contribution_amount + %s WHERE student_id=%s",
                    (delta, current.student_id),
                )

            cur.execute(f"{_SELECT} WHERE contribution_id=%s", (current.contribution_id,))
            return _row_to_contribution(fetchone(cur))

    def delete(self, contribution_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"{_SELECT} WHERE contribution_id=%s FOR UPDATE", (int(contribution_id),))
            r = fetchone(cur)
            if not r:
                return False
            current = _row_to_contribution(r)

            cur.execute("DELETE FROM contributions WHERE contribution_id=%s", (current.contribution_id,))
            cur.execute(
                "UPDATE students SET contribution_amount = GREATEST(0, contribution_amount - %s) WHERE student_id=%s",
                (current.amount, current.student_id),
            )
            return True

    def total_amount(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COALESCE(SUM(amount), 0) AS total FROM contributions")
            return int(fetchone(cur)["total"])

    def recalculate_student_totals(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE students s
                LEFT JOIN (
                    SELECT student_id, SUM(amount) AS total
                    FROM contributions
                    GROUP BY student_id
                ) c ON c.student_id = s.student_id
                SET s.contribution_amount = COALESCE(c.total, 0)
                WHERE s.contribution_amount <> COALESCE(c.total, 0)
                """
            )
            changed = int(cur.rowcount)
        logger.info("Recalculated contribution totals: %d students changed", changed)
        return changed
