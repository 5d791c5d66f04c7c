from __future__ import annotations

from enum import Enum
from typing import Any, Mapping, Optional, Sequence

from ..core.enums import AttendingStatus, Gender, PaidStatus, Section
from ..database.connection import DatabaseConnection
from ..database.mysql_base import build_set_clause, db_cursor, fetchall, fetchone, paginate_clause
from .model import EDITABLE_FIELDS, NewStudent, Student, StudentQuery
from .repository import StudentRepository

_COLUMNS = """
    student_id, first_name, last_name, section, gender, mobile, email, dob, city, work,
    attending_status, paid_status, contribution_amount, created_at
"""


def row_to_student(r: Mapping[str, Any]) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        first_name=r["first_name"],
        last_name=r["last_name"],
        section=Section(r["section"]),
        gender=Gender(r["gender"]),
        mobile=r["mobile"],
        email=r.get("email"),
        dob=r.get("dob"),
        city=r.get("city"),
        work=r.get("work"),
        attending_status=AttendingStatus(r["attending_status"]),
        paid_status=PaidStatus(r["paid_status"]),
        contribution_amount=int(r.get("contribution_amount") or 0),
        created_at=r.get("created_at"),
    )


def _db_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_id(self, student_id: int) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def get_by_mobile(self, mobile: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE mobile=%s", (mobile,))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def list_students(self, query: StudentQuery = StudentQuery()) -> Sequence[Student]:
        clauses = ["1=1"]
        params: list[object] = []

        if query.section is not None:
            clauses.append("section=%s")
            params.append(query.section.value)
        if query.search:
            term = f"%{query.search.lower()}%"
            clauses.append(
                "(LOWER(first_name) LIKE %s OR LOWER(last_name) LIKE %s OR mobile LIKE %s"
                " OR LOWER(COALESCE(email, '')) LIKE %s OR LOWER(COALESCE(city, '')) LIKE %s)"
            )
            params.extend([term] * 5)

        where = " AND ".join(clauses)
        page_sql, page_params = paginate_clause(query.limit, query.offset)

        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"SELECT {_COLUMNS} FROM students WHERE {where} ORDER BY first_name, student_id{page_sql}",
                tuple(params + list(page_params)),
            )
            return [row_to_student(r) for r in fetchall(cur)]

    def create(self, data: NewStudent) -> Student:
        changes = data.as_changes()
        columns = ", ".join(changes.keys())
        placeholders = ", ".join(["%s"] * len(changes))
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"INSERT INTO students({columns}, contribution_amount) VALUES({placeholders}, 0)",
                tuple(_db_value(v) for v in changes.values()),
            )
            new_id = int(cur.lastrowid)
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (new_id,))
            return row_to_student(fetchone(cur))

    def update(self, student_id: int, changes: Mapping[str, Any]) -> Optional[Student]:
        allowed = {k: _db_value(v) for k, v in changes.items() if k in EDITABLE_FIELDS}
        with db_cursor(self._conn_factory) as (_, cur):
            if allowed:
                set_sql, values = build_set_clause(allowed)
                cur.execute(
                    f"UPDATE students SET {set_sql} WHERE student_id=%s",
                    tuple(values) + (int(student_id),),
                )
            cur.execute(f"SELECT {_COLUMNS} FROM students WHERE student_id=%s", (int(student_id),))
            r = fetchone(cur)
            return row_to_student(r) if r else None

    def delete_by_id(self, student_id: int) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("DELETE FROM students WHERE student_id=%s", (int(student_id),))
            return cur.rowcount > 0
