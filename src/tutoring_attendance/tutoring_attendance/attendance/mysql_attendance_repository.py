from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Optional

from mysql.connector import errors as mysql_errors

from ..common.datetime_utils import naive
from ..core.enums import AttendanceStatus
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchone, is_duplicate_key
from .model import AttendanceRecord
from .repository import AttendanceRepository

_COLUMNS = """
    student_id, attendance_date, status, is_makeup, marked_by, marked_at,
    overridden_at, overridden_by, notes
"""


def row_to_record(r: Dict[str, Any], *, prefix: str = "") -> AttendanceRecord:
    return AttendanceRecord(
        student_id=int(r[f"{prefix}student_id"]),
        attendance_date=r[f"{prefix}attendance_date"],
        status=AttendanceStatus(r[f"{prefix}status"]),
        is_makeup=bool(r.get(f"{prefix}is_makeup")),
        marked_by=r.get(f"{prefix}marked_by"),
        marked_at=r[f"{prefix}marked_at"],
        overridden_at=r.get(f"{prefix}overridden_at"),
        overridden_by=r.get(f"{prefix}overridden_by"),
        notes=r.get(f"{prefix}notes"),
    )


class MySQLAttendanceRepository(AttendanceRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def find_by_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                f"""
                SELECT {_COLUMNS}
                FROM attendance_records
                WHERE student_id=%s AND attendance_date=%s
                """,
                (int(student_id), attendance_date),
            )
            r = fetchone(cur)
            return row_to_record(r) if r else None

    def create_if_absent(
        self,
        *,
        student_id: int,
        attendance_date: date,
        status: AttendanceStatus,
        marked_by: str,
        marked_at: datetime,
        is_makeup: bool = False,
        notes: Optional[str] = None,
    ) -> bool:
        with db_cursor(self._conn_factory) as (_, cur):
            try:
                cur.execute(
                    """
                    INSERT INTO attendance_records(student_id, attendance_date, status, is_makeup, marked_by, marked_at, notes)
                    VALUES(%s,%s,%s,%s,%s,%s,%s)
                    """,
                    (int(student_id), attendance_date, status.value, int(bool(is_makeup)), marked_by, naive(marked_at), notes),
                )
            except mysql_errors.IntegrityError as e:
                if is_duplicate_key(e):
                    return False
                raise
            return cur.rowcount > 0

    def update_status_if_currently_auto_absent(
        self,
        *,
        student_id: int,
        attendance_date: date,
        overridden_by: str,
        overridden_at: datetime,
        notes: Optional[str] = None,
    ) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                UPDATE attendance_records
                SET status=%s, overridden_at=%s, overridden_by=%s, notes=COALESCE(%s, notes)
                WHERE student_id=%s AND attendance_date=%s AND status=%s
                """,
                (
                    AttendanceStatus.PRESENT.value,
                    naive(overridden_at),
                    overridden_by,
                    notes,
                    int(student_id),
                    attendance_date,
                    AttendanceStatus.ABSENT_AUTO.value,
                ),
            )
            return int(cur.rowcount)

    def count_auto_absent_marked_between(self, *, start: datetime, end: datetime) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT COUNT(*) AS n
                FROM attendance_records
                WHERE status=%s AND marked_at >= %s AND marked_at < %s
                """,
                (AttendanceStatus.ABSENT_AUTO.value, naive(start), naive(end)),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_auto_absent(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                "SELECT COUNT(*) AS n FROM attendance_records WHERE status=%s",
                (AttendanceStatus.ABSENT_AUTO.value,),
            )
            r = fetchone(cur)
            return int(r["n"]) if r else 0

    def count_overridden(self) -> int:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute("SELECT COUNT(*) AS n FROM attendance_records WHERE overridden_at IS NOT NULL")
            r = fetchone(cur)
            return int(r["n"]) if r else 0
