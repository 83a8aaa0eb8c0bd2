from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Protocol

from ..core.enums import AttendanceStatus
from .model import AttendanceRecord


class AttendanceRepository(Protocol):
    def find_by_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        raise NotImplementedError

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
        """Insert the day's record unless one already exists.

        Returns False when a row for (student_id, attendance_date) is already
        stored, including when another writer inserted it concurrently.
        """

        raise NotImplementedError

    def update_status_if_currently_auto_absent(
        self,
        *,
        student_id: int,
        attendance_date: date,
        overridden_by: str,
        overridden_at: datetime,
        notes: Optional[str] = None,
    ) -> int:
        """Flip ABSENT_AUTO to PRESENT. Returns the number of rows changed."""

        raise NotImplementedError

    def count_auto_absent_marked_between(self, *, start: datetime, end: datetime) -> int:
        raise NotImplementedError

    def count_auto_absent(self) -> int:
        raise NotImplementedError

    def count_overridden(self) -> int:
        raise NotImplementedError
