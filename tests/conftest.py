from __future__ import annotations

import threading
from datetime import date, datetime
from typing import Optional

import pytest

from src.tutoring_attendance.tutoring_attendance.attendance.model import AttendanceRecord
from src.tutoring_attendance.tutoring_attendance.attendance.service import AttendanceService
from src.tutoring_attendance.tutoring_attendance.absence.sweep import AutoAbsenceSweep
from src.tutoring_attendance.tutoring_attendance.core.enums import AttendanceStatus, GroupPattern
from src.tutoring_attendance.tutoring_attendance.core.exceptions import StorageError
from src.tutoring_attendance.tutoring_attendance.settings.grace_period import GracePeriodStore
from src.tutoring_attendance.tutoring_attendance.students.model import Student, StudentDay

# 2026-02-07 is a Saturday.
SATURDAY = date(2026, 2, 7)


class InMemoryAttendance:
    """Keyed by (student_id, date) like the table's primary key."""

    def __init__(self):
        self._rows: dict[tuple[int, date], AttendanceRecord] = {}
        self._lock = threading.Lock()
        self.unavailable = False

    def _check(self):
        if self.unavailable:
            raise StorageError("database down")

    def find_by_student_and_date(self, student_id: int, attendance_date: date) -> Optional[AttendanceRecord]:
        self._check()
        return self._rows.get((student_id, attendance_date))

    def create_if_absent(self, *, student_id, attendance_date, status, marked_by, marked_at, is_makeup=False, notes=None) -> bool:
        self._check()
        with self._lock:
            key = (student_id, attendance_date)
            if key in self._rows:
                return False
            self._rows[key] = AttendanceRecord(
                student_id=student_id,
                attendance_date=attendance_date,
                status=status,
                marked_at=marked_at,
                is_makeup=is_makeup,
                marked_by=marked_by,
                notes=notes,
            )
            return True

    def update_status_if_currently_auto_absent(self, *, student_id, attendance_date, overridden_by, overridden_at, notes=None) -> int:
        self._check()
        with self._lock:
            key = (student_id, attendance_date)
            rec = self._rows.get(key)
            if rec is None or rec.status != AttendanceStatus.ABSENT_AUTO:
                return 0
            self._rows[key] = AttendanceRecord(
                student_id=rec.student_id,
                attendance_date=rec.attendance_date,
                status=AttendanceStatus.PRESENT,
                marked_at=rec.marked_at,
                is_makeup=rec.is_makeup,
                marked_by=rec.marked_by,
                overridden_at=overridden_at,
                overridden_by=overridden_by,
                notes=notes if notes is not None else rec.notes,
            )
            return 1

    def count_auto_absent_marked_between(self, *, start: datetime, end: datetime) -> int:
        self._check()
        return sum(
            1
            for r in self._rows.values()
            if r.status == AttendanceStatus.ABSENT_AUTO and start <= r.marked_at < end
        )

    def count_auto_absent(self) -> int:
        self._check()
        return sum(1 for r in self._rows.values() if r.status == AttendanceStatus.ABSENT_AUTO)

    def count_overridden(self) -> int:
        self._check()
        return sum(1 for r in self._rows.values() if r.overridden_at is not None)

    def all(self) -> list[AttendanceRecord]:
        return list(self._rows.values())


class InMemoryStudents:
    def __init__(self, attendance: InMemoryAttendance):
        self._attendance = attendance
        self._by_id: dict[int, Student] = {}

    def add(self, student: Student) -> Student:
        self._by_id[student.student_id] = student
        return student

    def get_by_code(self, code: str) -> Optional[Student]:
        return next((s for s in self._by_id.values() if s.code == code), None)

    def list_with_attendance_on(self, day: date):
        return [
            StudentDay(student=s, record=self._attendance.find_by_student_and_date(s.student_id, day))
            for s in sorted(self._by_id.values(), key=lambda s: s.student_id)
        ]


class InMemorySettings:
    def __init__(self, values: Optional[dict[str, str]] = None):
        self.values: dict[str, str] = dict(values or {})
        self.unavailable = False

    def get(self, key: str) -> Optional[str]:
        if self.unavailable:
            raise StorageError("database down")
        return self.values.get(key)

    def set(self, key: str, value: str) -> None:
        if self.unavailable:
            raise StorageError("database down")
        self.values[key] = value


class InMemoryRunMarker:
    def __init__(self, last: Optional[datetime] = None):
        self.last = last
        self.writes: list[datetime] = []

    def read(self) -> Optional[datetime]:
        return self.last

    def write(self, when: datetime) -> None:
        self.last = when
        self.writes.append(when)


@pytest.fixture
def fixed_now() -> datetime:
    return datetime(2026, 2, 7, 14, 15, 0)


@pytest.fixture
def attendance_repo() -> InMemoryAttendance:
    return InMemoryAttendance()


@pytest.fixture
def students_repo(attendance_repo) -> InMemoryStudents:
    return InMemoryStudents(attendance_repo)


@pytest.fixture
def settings_repo() -> InMemorySettings:
    return InMemorySettings()


@pytest.fixture
def run_marker() -> InMemoryRunMarker:
    return InMemoryRunMarker()


@pytest.fixture
def make_student(students_repo):
    counter = {"next": 1}

    def _make(
        *,
        pattern: GroupPattern = GroupPattern.SAT_TUE,
        time: str = "02:00 PM",
        enrolled: date = date(2026, 1, 1),
        name: Optional[str] = None,
    ) -> Student:
        sid = counter["next"]
        counter["next"] += 1
        return students_repo.add(
            Student(
                student_id=sid,
                code=f"S{sid:04d}",
                name=name or f"Student {sid}",
                group_pattern=pattern,
                group_time=time,
                enrollment_date=enrolled,
            )
        )

    return _make


@pytest.fixture
def grace_store(settings_repo) -> GracePeriodStore:
    return GracePeriodStore(settings_repo)


@pytest.fixture
def attendance_service(attendance_repo, students_repo) -> AttendanceService:
    return AttendanceService(attendance_repo, students_repo)


@pytest.fixture
def sweep(students_repo, attendance_service, grace_store) -> AutoAbsenceSweep:
    return AutoAbsenceSweep(students_repo, attendance_service, grace_store)
