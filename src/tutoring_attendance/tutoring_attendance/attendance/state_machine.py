"""Attendance transitions for one (student, day).

A day without a row is UNRECORDED. Once a row exists the only way forward is
overriding a system absence back to PRESENT; human absences and overridden
records are final.
"""

from __future__ import annotations

from typing import Optional

from ..core.enums import AttendanceState, AttendanceStatus
from .model import AttendanceRecord

TRANSITIONS: dict[AttendanceState, frozenset[AttendanceState]] = {
    AttendanceState.UNRECORDED: frozenset(
        {AttendanceState.PRESENT, AttendanceState.ABSENT_MANUAL, AttendanceState.ABSENT_AUTO}
    ),
    AttendanceState.ABSENT_AUTO: frozenset({AttendanceState.PRESENT}),
    AttendanceState.PRESENT: frozenset(),
    AttendanceState.ABSENT_MANUAL: frozenset(),
}


def state_of(record: Optional[AttendanceRecord]) -> AttendanceState:
    if record is None:
        return AttendanceState.UNRECORDED
    return AttendanceState(record.status.value)


def can_transition(current: AttendanceState, target: AttendanceState) -> bool:
    return target in TRANSITIONS[current]


def status_for(state: AttendanceState) -> AttendanceStatus:
    if state is AttendanceState.UNRECORDED:
        raise ValueError("UNRECORDED has no stored status")
    return AttendanceStatus(state.value)
