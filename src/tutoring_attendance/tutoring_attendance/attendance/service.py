from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime, tzinfo
from typing import Optional

from ..common.datetime_utils import now_local, to_local
from ..common.validators import require_non_empty
from ..core.constants import AUTO_ABSENCE_NOTE, OVERRIDE_NOTE, SYSTEM_ACTOR
from ..core.enums import AttendanceState, AttendanceStatus
from ..core.exceptions import AlreadyRecordedError, ValidationError
from ..students.model import Student
from ..students.repository import StudentRepository
from .model import AttendanceRecord
from .repository import AttendanceRepository
from .state_machine import can_transition, state_of, status_for

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MarkResult:
    student_id: int
    student_name: str
    attendance_date: date
    status: AttendanceStatus


class AttendanceService:
    """Every attendance write goes through here.

    Creation relies on the repository's uniqueness-guarded insert; the
    read-before-write in the human paths only produces a friendlier error.
    """

    def __init__(
        self,
        attendance: AttendanceRepository,
        students: StudentRepository,
        *,
        tz: tzinfo | None = None,
    ):
        self._attendance = attendance
        self._students = students
        self._tz = tz

    def _now(self, now: datetime | None) -> datetime:
        return to_local(now, self._tz) if now else now_local(self._tz)

    def _require_student(self, code: str) -> Student:
        code = require_non_empty(code, "Student code")
        student = self._students.get_by_code(code)
        if not student:
            raise ValidationError("Student not found")
        return student

    def _create(
        self,
        *,
        student: Student,
        target: AttendanceState,
        marked_by: str,
        now: datetime,
        is_makeup: bool = False,
        notes: Optional[str] = None,
    ) -> MarkResult:
        today = now.date()
        current = state_of(self._attendance.find_by_student_and_date(student.student_id, today))
        if not can_transition(current, target):
            raise AlreadyRecordedError("Already marked today", student_name=student.name)

        created = self._attendance.create_if_absent(
            student_id=student.student_id,
            attendance_date=today,
            status=status_for(target),
            marked_by=marked_by,
            marked_at=now,
            is_makeup=is_makeup,
            notes=notes,
        )
        if not created:
            raise AlreadyRecordedError("Already marked today", student_name=student.name)

        logger.info("Marked %s (%s) %s for %s", student.name, student.code, target.value, today)
        return MarkResult(
            student_id=student.student_id,
            student_name=student.name,
            attendance_date=today,
            status=status_for(target),
        )

    def mark_present(
        self,
        code: str,
        *,
        marked_by: str,
        is_makeup: bool = False,
        now: datetime | None = None,
    ) -> MarkResult:
        student = self._require_student(code)
        return self._create(
            student=student,
            target=AttendanceState.PRESENT,
            marked_by=require_non_empty(marked_by, "Marked by"),
            now=self._now(now),
            is_makeup=is_makeup,
        )

    def mark_absent(
        self,
        code: str,
        *,
        marked_by: str,
        notes: Optional[str] = None,
        now: datetime | None = None,
    ) -> MarkResult:
        student = self._require_student(code)
        return self._create(
            student=student,
            target=AttendanceState.ABSENT_MANUAL,
            marked_by=require_non_empty(marked_by, "Marked by"),
            now=self._now(now),
            notes=notes.strip() if notes else None,
        )

    def mark_auto_absent(self, student_id: int, day: date, *, now: datetime, grace_minutes: int) -> bool:
        """UNRECORDED -> ABSENT_AUTO. False when another writer got there first."""

        return self._attendance.create_if_absent(
            student_id=student_id,
            attendance_date=day,
            status=AttendanceStatus.ABSENT_AUTO,
            marked_by=SYSTEM_ACTOR,
            marked_at=now,
            notes=AUTO_ABSENCE_NOTE.format(grace=grace_minutes),
        )

    def override(self, student_id: int, day: date, overridden_by: str, *, now: datetime | None = None) -> bool:
        """ABSENT_AUTO -> PRESENT. Returns False (no-op) for any other state."""

        overridden_by = require_non_empty(overridden_by, "Overridden by")
        changed = self._attendance.update_status_if_currently_auto_absent(
            student_id=int(student_id),
            attendance_date=day,
            overridden_by=overridden_by,
            overridden_at=self._now(now),
            notes=OVERRIDE_NOTE,
        )
        if changed:
            logger.info("Auto-absence of student %s on %s overridden by %s", student_id, day, overridden_by)
        return changed > 0

    def get_record(self, student_id: int, day: date) -> Optional[AttendanceRecord]:
        return self._attendance.find_by_student_and_date(int(student_id), day)

    def get_state(self, student_id: int, day: date) -> AttendanceState:
        return state_of(self.get_record(student_id, day))
