"""Resolve weekly group patterns and session times.

Weekday indices are Sunday-based (0=Sunday .. 6=Saturday). Session times are
12-hour clock strings such as ``"02:00 PM"``.
"""

from __future__ import annotations

import calendar
import re
from datetime import date

from ..core.enums import GroupPattern
from ..core.exceptions import ScheduleFormatError

SUNDAY, MONDAY, TUESDAY, WEDNESDAY, THURSDAY, FRIDAY, SATURDAY = range(7)

PATTERN_WEEKDAYS: dict[GroupPattern, frozenset[int]] = {
    GroupPattern.SAT_TUE: frozenset({SATURDAY, TUESDAY}),
    GroupPattern.SUN_WED: frozenset({SUNDAY, WEDNESDAY}),
    GroupPattern.MON_THU: frozenset({MONDAY, THURSDAY}),
    GroupPattern.SAT_TUE_THU: frozenset({SATURDAY, TUESDAY, THURSDAY}),
}

_TIME_RE = re.compile(r"^(\d{1,2}):(\d{2})\s+(AM|PM)$", re.IGNORECASE)


def _as_pattern(pattern: GroupPattern | str) -> GroupPattern:
    if isinstance(pattern, GroupPattern):
        return pattern
    try:
        return GroupPattern(str(pattern).strip().upper())
    except ValueError:
        raise ScheduleFormatError(f"Unknown group pattern: {pattern!r}") from None


def weekday_index(day: date) -> int:
    return day.isoweekday() % 7


def session_weekdays(pattern: GroupPattern | str) -> frozenset[int]:
    return PATTERN_WEEKDAYS[_as_pattern(pattern)]


def is_session_day(pattern: GroupPattern | str, day: date) -> bool:
    return weekday_index(day) in session_weekdays(pattern)


def parse_session_time(value: str) -> int:
    """Convert ``"HH:MM AM|PM"`` to minutes since midnight.

    ``12:xx AM`` is just after midnight and ``12:xx PM`` just after noon.
    """

    if not isinstance(value, str):
        raise ScheduleFormatError(f"Invalid session time: {value!r}")

    match = _TIME_RE.match(value.strip())
    if not match:
        raise ScheduleFormatError(f"Invalid session time: {value!r}")

    hours, minutes, period = int(match.group(1)), int(match.group(2)), match.group(3).upper()
    if not 1 <= hours <= 12 or minutes > 59:
        raise ScheduleFormatError(f"Invalid session time: {value!r}")

    hours = hours % 12
    if period == "PM":
        hours += 12
    return hours * 60 + minutes


def session_dates_for_month(year: int, month: int, pattern: GroupPattern | str) -> list[date]:
    days = session_weekdays(pattern)
    _, last_day = calendar.monthrange(year, month)
    return [
        date(year, month, d)
        for d in range(1, last_day + 1)
        if weekday_index(date(year, month, d)) in days
    ]
