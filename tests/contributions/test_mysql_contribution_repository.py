from __future__ import annotations

from datetime import date, datetime

import pytest

from reunion_manager.contributions.mysql_contribution_repository import MySQLContributionRepository
from reunion_manager.core.exceptions import NotFoundError


class FakeCursor:
    """Records executed statements and answers fetchone() from a scripted queue."""

    def __init__(self, rows, lastrowid=None, rowcount=0):
        self._rows = list(rows)
        self.lastrowid = lastrowid
        self.rowcount = rowcount
        self.executed = []

    def execute(self, sql, params=None):
        self.executed.append((" ".join(sql.split()), params))

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def close(self):
        pass


class FakeConnection:
    def __init__(self, cursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False

    def cursor(self, dictionary=False):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        pass


class FakeConnFactory:
    def __init__(self, conn):
        self._conn = conn

    def connect(self, *, with_database=True):
        return self._conn


def _contribution_row(contribution_id=11, student_id=7, amount=500):
    return {
        "contribution_id": contribution_id,
        "student_id": student_id,
        "amount": amount,
        "date": date(2025, 2, 1),
        "recorded_by": 1,
        "created_at": datetime(2025, 2, 1, 10, 0, 0),
    }


def _repo(rows, **cursor_kwargs):
    cur = FakeCursor(rows, **cursor_kwargs)
    conn = FakeConnection(cur)
    return MySQLContributionRepository(FakeConnFactory(conn)), cur, conn


def test_first_contribution_locks_student_and_marks_paid():
    repo, cur, conn = _repo(
        [{"student_id": 7, "paid_status": "not_paid"}, {"n": 1}, _contribution_row()],
        lastrowid=11,
    )

    created = repo.create(student_id=7, amount=500, date=date(2025, 2, 1), recorded_by=1)

    statements = [sql for sql, _ in cur.executed]
    assert statements[0].endswith("FROM students WHERE student_id=%s FOR UPDATE")
    assert statements[1].startswith("INSERT INTO contributions")
    assert cur.executed[1][1] == (7, 500, date(2025, 2, 1), 1)
    assert statements[2].startswith("SELECT COUNT(*)")
    assert statements[3] == (
        "UPDATE students SET contribution_amount = contribution_amount + %s, paid_status=%s WHERE student_id=%s"
    )
    assert cur.executed[3][1] == (500, "paid", 7)
    assert created.contribution_id == 11
    assert conn.committed


def test_second_contribution_only_increments_total():
    repo, cur, conn = _repo(
        [{"student_id": 7, "paid_status": "paid"}, {"n": 2}, _contribution_row(12, amount=300)],
        lastrowid=12,
    )

    repo.create(student_id=7, amount=300, date=date(2025, 2, 1), recorded_by=1)

    sql, params = cur.executed[3]
    assert sql == "UPDATE students SET contribution_amount = contribution_amount + %s WHERE student_id=%s"
    assert params == (300, 7)
    assert "paid_status" not in sql
    assert conn.committed


def test_create_for_unknown_student_rolls_back_without_insert():
    repo, cur, conn = _repo([])

    with pytest.raises(NotFoundError):
        repo.create(student_id=99, amount=100, date=date(2025, 2, 1))

    assert len(cur.executed) == 1
    assert conn.rolled_back
    assert not conn.committed


def test_delete_decrements_with_floor_at_zero():
    repo, cur, conn = _repo([_contribution_row(amount=500)])

    assert repo.delete(11) is True

    statements = [sql for sql, _ in cur.executed]
    assert statements[0].endswith("WHERE contribution_id=%s FOR UPDATE")
    assert cur.executed[1] == ("DELETE FROM contributions WHERE contribution_id=%s", (11,))
    assert statements[2] == (
        "UPDATE students SET contribution_amount = GREATEST(0, contribution_amount - %s) WHERE student_id=%s"
    )
    assert cur.executed[2][1] == (500, 7)
    assert conn.committed


def test_delete_unknown_contribution_touches_nothing():
    repo, cur, _ = _repo([])

    assert repo.delete(404) is False
    assert len(cur.executed) == 1


def test_update_applies_amount_delta_to_student():
    repo, cur, _ = _repo([_contribution_row(amount=500), _contribution_row(amount=800)])

    updated = repo.update(11, amount=800)

    assert cur.executed[1] == ("UPDATE contributions SET amount=%s WHERE contribution_id=%s", (800, 11))
    assert cur.executed[2] == (
        "UPDATE students SET contribution_amount = contribution_amount + %s WHERE student_id=%s",
        (300, 7),
    )
    assert updated.amount == 800


def test_recalculate_reports_changed_rows():
    repo, cur, _ = _repo([], rowcount=3)

    assert repo.recalculate_student_totals() == 3
    assert cur.executed[0][0].startswith("UPDATE students s LEFT JOIN")
