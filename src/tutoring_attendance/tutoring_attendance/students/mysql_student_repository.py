from __future__ import annotations

from datetime import date
from typing import Any, Dict, Optional, Sequence

from ..attendance.mysql_attendance_repository import row_to_record
from ..core.enums import GroupPattern
from ..database.connection import DatabaseConnection
from ..database.mysql_base import db_cursor, fetchall, fetchone
from .model import Student, StudentDay
from .repository import StudentRepository


def _row_to_student(r: Dict[str, Any]) -> Student:
    return Student(
        student_id=int(r["student_id"]),
        code=str(r["code"]),
        name=r["name"],
        group_pattern=GroupPattern(r["group_pattern"]),
        group_time=r["group_time"],
        enrollment_date=r["enrollment_date"],
    )


class MySQLStudentRepository(StudentRepository):
    def __init__(self, conn_factory: DatabaseConnection):
        self._conn_factory = conn_factory

    def get_by_code(self, code: str) -> Optional[Student]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT student_id, code, name, group_pattern, group_time, enrollment_date
                FROM students
                WHERE code=%s
                """,
                (code,),
            )
            r = fetchone(cur)
            return _row_to_student(r) if r else None

    def list_with_attendance_on(self, day: date) -> Sequence[StudentDay]:
        with db_cursor(self._conn_factory) as (_, cur):
            cur.execute(
                """
                SELECT
                    s.student_id, s.code, s.name, s.group_pattern, s.group_time, s.enrollment_date,
                    ar.student_id AS ar_student_id,
                    ar.attendance_date AS ar_attendance_date,
                    ar.status AS ar_status,
                    ar.is_makeup AS ar_is_makeup,
                    ar.marked_by AS ar_marked_by,
                    ar.marked_at AS ar_marked_at,
                    ar.overridden_at AS ar_overridden_at,
                    ar.overridden_by AS ar_overridden_by,
                    ar.notes AS ar_notes
                FROM students s
                LEFT JOIN attendance_records ar
                    ON ar.student_id = s.student_id AND ar.attendance_date = %s
                ORDER BY s.student_id ASC
                """,
                (day,),
            )
            rows = fetchall(cur)
            return [
                StudentDay(
                    student=_row_to_student(r),
                    record=row_to_record(r, prefix="ar_") if r.get("ar_student_id") is not None else None,
                )
                for r in rows
            ]
