from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime, tzinfo

from ..attendance.service import AttendanceService
from ..common.datetime_utils import minutes_since_midnight, now_local, to_local
from ..core.exceptions import StorageError
from ..schedules.resolver import is_session_day, parse_session_time
from ..settings.grace_period import GracePeriodStore
from ..students.repository import StudentRepository

logger = logging.getLogger(__name__)


@dataclass
class SweepResult:
    processed: int = 0
    marked: int = 0
    errors: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {"processed": self.processed, "marked": self.marked, "errors": list(self.errors)}


class AutoAbsenceSweep:
    """One pass over all students for today's auto-absences.

    Each student is handled independently: a bad schedule only adds an entry
    to ``errors``. A ``StorageError`` aborts the pass and propagates.
    """

    def __init__(
        self,
        students: StudentRepository,
        attendance: AttendanceService,
        grace_period: GracePeriodStore,
        *,
        tz: tzinfo | None = None,
    ):
        self._students = students
        self._attendance = attendance
        self._grace_period = grace_period
        self._tz = tz

    def run(self, now: datetime | None = None) -> SweepResult:
        now = to_local(now, self._tz) if now else now_local(self._tz)
        today = now.date()
        current_minutes = minutes_since_midnight(now)
        grace = self._grace_period.get()
        result = SweepResult()

        logger.info("Processing auto-absences at %s, grace period: %s minutes", now.isoformat(), grace)

        for entry in self._students.list_with_attendance_on(today):
            student = entry.student
            result.processed += 1
            try:
                if not is_session_day(student.group_pattern, today):
                    continue
                if student.enrollment_date > today:
                    continue
                if entry.record is not None:
                    continue

                deadline = parse_session_time(student.group_time) + grace
                if current_minutes < deadline:
                    continue

                if self._attendance.mark_auto_absent(student.student_id, today, now=now, grace_minutes=grace):
                    result.marked += 1
                    logger.info("Auto-marked %s (%s) as absent", student.name, student.code)
                else:
                    logger.debug("Skipped %s (%s): recorded concurrently", student.name, student.code)
            except StorageError:
                raise
            except Exception as e:
                message = f"Error processing student {student.code}: {e}"
                result.errors.append(message)
                logger.error(message)

        logger.info(
            "Auto-absence processing complete: %s students marked absent out of %s processed",
            result.marked,
            result.processed,
        )
        return result
