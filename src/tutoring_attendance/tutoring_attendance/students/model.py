from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..attendance.model import AttendanceRecord
from ..core.enums import GroupPattern


@dataclass(frozen=True)
class Student:
    """Domain entity: an enrolled student and their weekly session slot."""

    student_id: int
    code: str
    name: str
    group_pattern: GroupPattern
    group_time: str
    enrollment_date: date


@dataclass(frozen=True)
class StudentDay:
    """Read-model for the sweep: a student plus that day's record, if any."""

    student: Student
    record: Optional[AttendanceRecord] = None
