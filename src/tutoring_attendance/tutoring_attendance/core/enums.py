from __future__ import annotations

from enum import Enum


class GroupPattern(str, Enum):
    """Recurring weekly session days a student belongs to."""

    SAT_TUE = "SAT_TUE"
    SUN_WED = "SUN_WED"
    MON_THU = "MON_THU"
    SAT_TUE_THU = "SAT_TUE_THU"


class AttendanceStatus(str, Enum):
    """Attendance status as stored in the database."""

    PRESENT = "PRESENT"
    ABSENT_AUTO = "ABSENT_AUTO"
    ABSENT_MANUAL = "ABSENT_MANUAL"


class AttendanceState(str, Enum):
    """Status plus the implicit state of a day that has no record yet."""

    UNRECORDED = "UNRECORDED"
    PRESENT = "PRESENT"
    ABSENT_AUTO = "ABSENT_AUTO"
    ABSENT_MANUAL = "ABSENT_MANUAL"


class RunMarkerBackend(str, Enum):
    FILE = "file"
    SETTINGS = "settings"
