from __future__ import annotations

from datetime import date, datetime

import mysql.connector
import pytest
from mysql.connector import errors as mysql_errors

from src.tutoring_attendance.tutoring_attendance.absence.sweep import AutoAbsenceSweep
from src.tutoring_attendance.tutoring_attendance.absence.trigger import ResilientTrigger
from src.tutoring_attendance.tutoring_attendance.attendance.mysql_attendance_repository import MySQLAttendanceRepository
from src.tutoring_attendance.tutoring_attendance.attendance.service import AttendanceService
from src.tutoring_attendance.tutoring_attendance.core.enums import AttendanceStatus
from src.tutoring_attendance.tutoring_attendance.core.exceptions import StorageError
from src.tutoring_attendance.tutoring_attendance.database.connection import DBConfig, DatabaseConnection, is_unavailable
from src.tutoring_attendance.tutoring_attendance.database.mysql_base import db_cursor

DAY = date(2026, 2, 7)
NOW = datetime(2026, 2, 7, 15, 0)


def refused() -> mysql_errors.DatabaseError:
    # What the C extension raises for a refused connection.
    return mysql_errors.DatabaseError(msg="Can't connect to MySQL server", errno=2003, sqlstate="HY000")


class FakeCursor:
    def __init__(self, *, error: Exception | None = None, rowcount: int = 1, row: dict | None = None):
        self.error = error
        self.rowcount = rowcount
        self.row = row
        self.executed: list[tuple] = []
        self.closed = False

    def execute(self, sql, params=None):
        self.executed.append((sql, params))
        if self.error is not None:
            raise self.error

    def fetchone(self):
        return self.row

    def fetchall(self):
        return [self.row] if self.row else []

    def close(self):
        self.closed = True


class FakeConnection:
    def __init__(self, cursor: FakeCursor):
        self._cursor = cursor
        self.committed = False
        self.rolled_back = False
        self.closed = False

    def cursor(self, dictionary=True):
        return self._cursor

    def commit(self):
        self.committed = True

    def rollback(self):
        self.rolled_back = True

    def close(self):
        self.closed = True


class FakeConnectionFactory:
    def __init__(self, conn: FakeConnection | None = None, *, error: Exception | None = None):
        self._conn = conn
        self._error = error

    def connect(self):
        if self._error is not None:
            raise self._error
        return self._conn


def _insert(repo: MySQLAttendanceRepository) -> bool:
    return repo.create_if_absent(
        student_id=1,
        attendance_date=DAY,
        status=AttendanceStatus.ABSENT_AUTO,
        marked_by="SYSTEM",
        marked_at=NOW,
    )


def test_insert_commits():
    conn = FakeConnection(FakeCursor(rowcount=1))

    assert _insert(MySQLAttendanceRepository(FakeConnectionFactory(conn))) is True
    assert conn.committed and conn.closed


def test_duplicate_key_means_already_recorded():
    dup = mysql_errors.IntegrityError(msg="Duplicate entry '1-2026-02-07'", errno=1062, sqlstate="23000")
    conn = FakeConnection(FakeCursor(error=dup))

    assert _insert(MySQLAttendanceRepository(FakeConnectionFactory(conn))) is False
    assert conn.closed


def test_other_integrity_errors_propagate():
    fk = mysql_errors.IntegrityError(msg="Cannot add or update a child row", errno=1452, sqlstate="23000")
    conn = FakeConnection(FakeCursor(error=fk))

    with pytest.raises(mysql_errors.IntegrityError):
        _insert(MySQLAttendanceRepository(FakeConnectionFactory(conn)))
    assert conn.rolled_back
    assert not conn.committed
    assert conn.closed


def test_lost_connection_mid_statement_is_storage_error():
    lost = mysql_errors.OperationalError(msg="Lost connection to MySQL server", errno=2013)
    cursor = FakeCursor(error=lost)
    conn = FakeConnection(cursor)

    with pytest.raises(StorageError):
        with db_cursor(FakeConnectionFactory(conn)) as (_, cur):
            cur.execute("SELECT 1")
    assert conn.rolled_back
    assert cursor.closed and conn.closed


def test_refused_connection_is_storage_error():
    repo = MySQLAttendanceRepository(FakeConnectionFactory(error=refused()))

    with pytest.raises(StorageError):
        repo.find_by_student_and_date(1, DAY)


def test_override_returns_rowcount():
    assert (
        MySQLAttendanceRepository(FakeConnectionFactory(FakeConnection(FakeCursor(rowcount=1))))
        .update_status_if_currently_auto_absent(student_id=1, attendance_date=DAY, overridden_by="admin1", overridden_at=NOW)
        == 1
    )
    assert (
        MySQLAttendanceRepository(FakeConnectionFactory(FakeConnection(FakeCursor(rowcount=0))))
        .update_status_if_currently_auto_absent(student_id=1, attendance_date=DAY, overridden_by="admin1", overridden_at=NOW)
        == 0
    )


def test_override_only_touches_auto_absences():
    cursor = FakeCursor(rowcount=0)
    MySQLAttendanceRepository(FakeConnectionFactory(FakeConnection(cursor))).update_status_if_currently_auto_absent(
        student_id=1, attendance_date=DAY, overridden_by="admin1", overridden_at=NOW
    )

    sql, params = cursor.executed[0]
    assert "status=%s" in sql.split("WHERE", 1)[1]
    assert params[-1] == AttendanceStatus.ABSENT_AUTO.value


@pytest.mark.parametrize(
    "error, expected",
    [
        (mysql_errors.DatabaseError(msg="refused", errno=2003, sqlstate="HY000"), True),
        (mysql_errors.DatabaseError(msg="gone away", errno=2006), True),
        (mysql_errors.InterfaceError(msg="no connection"), True),
        (mysql_errors.OperationalError(msg="lost connection", errno=2013), True),
        (mysql_errors.IntegrityError(msg="duplicate", errno=1062), False),
        (mysql_errors.DatabaseError(msg="bad value", errno=1366), False),
        (mysql_errors.ProgrammingError(msg="syntax", errno=1064), False),
        (ValueError("not a driver error"), False),
    ],
)
def test_is_unavailable(error, expected):
    assert is_unavailable(error) is expected


def test_connect_maps_client_errors(monkeypatch):
    def _refuse(**kwargs):
        raise refused()

    monkeypatch.setattr(mysql.connector, "connect", _refuse)
    conn = DatabaseConnection(DBConfig.from_dict({"database": "tutoring_attendance"}))

    with pytest.raises(StorageError):
        conn.connect()


def test_connect_keeps_server_errors(monkeypatch):
    def _denied(**kwargs):
        raise mysql_errors.ProgrammingError(msg="Access denied", errno=1045, sqlstate="28000")

    monkeypatch.setattr(mysql.connector, "connect", _denied)
    conn = DatabaseConnection(DBConfig.from_dict({}))

    with pytest.raises(mysql_errors.ProgrammingError):
        conn.connect()


def test_outage_mid_sweep_defers_the_run(students_repo, grace_store, run_marker, make_student):
    make_student(time="02:00 PM")
    attendance = AttendanceService(MySQLAttendanceRepository(FakeConnectionFactory(error=refused())), students_repo)
    trigger = ResilientTrigger(AutoAbsenceSweep(students_repo, attendance, grace_store), run_marker)

    assert trigger.maybe_run(NOW) is None
    assert run_marker.writes == []
