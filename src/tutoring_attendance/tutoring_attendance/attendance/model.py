from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from typing import Optional

from ..core.enums import AttendanceStatus


@dataclass(frozen=True)
class AttendanceRecord:
    """Domain entity: one student's attendance for one calendar day."""

    student_id: int
    attendance_date: date
    status: AttendanceStatus
    marked_at: datetime
    is_makeup: bool = False
    marked_by: Optional[str] = None
    overridden_at: Optional[datetime] = None
    overridden_by: Optional[str] = None
    notes: Optional[str] = None

    def to_dict(self) -> dict:
        return {
            "student_id": self.student_id,
            "date": self.attendance_date.strftime("%Y-%m-%d"),
            "status": self.status.value,
            "is_makeup": self.is_makeup,
            "marked_by": self.marked_by,
            "marked_at": self.marked_at.isoformat(),
            "overridden_at": self.overridden_at.isoformat() if self.overridden_at else None,
            "overridden_by": self.overridden_by,
            "notes": self.notes,
        }
