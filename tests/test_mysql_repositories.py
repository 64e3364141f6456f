from __future__ import annotations

from decimal import Decimal
from types import SimpleNamespace

import mysql.connector
import pytest

from src.group_attendance.group_attendance.attendance.model import AttendanceEntry
from src.group_attendance.group_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.group_attendance.group_attendance.core.enums import AttendanceStatus
from src.group_attendance.group_attendance.core.exceptions import ConflictError, ValidationError
from src.group_attendance.group_attendance.database.mysql_base import db_cursor


class ScriptedCursor:
    def __init__(self, conn: "ScriptedConnection"):
        self._conn = conn
        self.closed = False

    def execute(self, sql, params=None):
        self._conn.executed.append((" ".join(sql.split()), params))
        error = self._conn.fail_on.get(len(self._conn.executed))
        if error is not None:
            raise error

    def fetchone(self):
        return self._conn.rows[0] if self._conn.rows else None

    def fetchall(self):
        return list(self._conn.rows)

    def close(self):
        self.closed = True


class ScriptedConnection:
    def __init__(self, *, fail_on=None, rows=None):
        self.fail_on = fail_on or {}
        self.rows = rows or []
        self.executed: list[tuple[str, object]] = []
        self.committed = False
        self.rolled_back = False
        self.closed = False
        self.cursors: list[ScriptedCursor] = []

    def cursor(self, dictionary: bool = False):
        cur = ScriptedCursor(self)
        self.cursors.append(cur)
        return cur

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


def _factory(conn: ScriptedConnection):
    return SimpleNamespace(connect=lambda **_: conn)


def _sheet(*person_ids: int):
    return [AttendanceEntry(person_id=pid, status=AttendanceStatus.ATTENDED) for pid in person_ids]


def test_upsert_many_writes_all_rows_in_one_transaction():
    conn = ScriptedConnection()

    MySQLAttendanceRepository(_factory(conn)).upsert_many(5, _sheet(1, 2))

    assert len(conn.executed) == 2
    sql, params = conn.executed[0]
    assert "ON DUPLICATE KEY UPDATE estado=new.estado, observaciones=new.observaciones" in sql
    assert "VALUES(estado)" not in sql
    assert params == (5, 1, "asistio", None)
    assert conn.committed and not conn.rolled_back
    assert conn.closed


def test_missing_person_rolls_back_whole_sheet():
    conn = ScriptedConnection(fail_on={2: mysql.connector.IntegrityError(msg="fk", errno=1452)})

    with pytest.raises(ConflictError, match="El registro referenciado no existe"):
        MySQLAttendanceRepository(_factory(conn)).upsert_many(5, _sheet(1, 999))

    assert len(conn.executed) == 2
    assert conn.rolled_back
    assert not conn.committed
    assert conn.closed
    assert all(cur.closed for cur in conn.cursors)


def test_duplicate_key_is_a_conflict():
    conn = ScriptedConnection(fail_on={1: mysql.connector.IntegrityError(msg="dup", errno=1062)})

    with pytest.raises(ConflictError, match="El registro ya existe"):
        with db_cursor(_factory(conn)) as (_, cur):
            cur.execute("INSERT INTO personas(email) VALUES(%s)", ("ana@example.com",))

    assert conn.rolled_back and not conn.committed and conn.closed


def test_out_of_range_value_is_a_validation_error():
    conn = ScriptedConnection(fail_on={1: mysql.connector.DataError(msg="out of range", errno=1264)})

    with pytest.raises(ValidationError):
        MySQLAttendanceRepository(_factory(conn)).upsert_many(5, _sheet(1))

    assert conn.rolled_back and not conn.committed and conn.closed


def test_other_errors_roll_back_and_propagate():
    conn = ScriptedConnection(fail_on={1: mysql.connector.OperationalError(msg="gone away", errno=2006)})

    with pytest.raises(mysql.connector.OperationalError):
        MySQLAttendanceRepository(_factory(conn)).upsert_many(5, _sheet(1))

    assert conn.rolled_back and not conn.committed and conn.closed


def test_summary_for_reads_aggregate_row():
    conn = ScriptedConnection(rows=[{"total": 4, "attended": Decimal("2"), "excused": Decimal("1")}])

    summary = MySQLAttendanceRepository(_factory(conn)).summary_for(person_id=3, group_id=7)

    sql, params = conn.executed[0]
    assert "LEFT JOIN asistencias a ON a.reunion_id = r.id AND a.persona_id = %s" in sql
    assert params == (3, 7)
    assert (summary.total_meetings, summary.attended, summary.excused, summary.absent) == (4, 2, 1, 1)
    assert conn.committed


def test_summary_for_group_without_meetings():
    conn = ScriptedConnection(rows=[{"total": 0, "attended": 0, "excused": 0}])

    summary = MySQLAttendanceRepository(_factory(conn)).summary_for(person_id=3, group_id=7)

    assert summary.to_dict()["porcentaje"] == 0
    assert summary.absent == 0
