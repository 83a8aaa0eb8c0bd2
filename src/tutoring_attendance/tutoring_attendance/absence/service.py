from __future__ import annotations

from datetime import datetime, timedelta, tzinfo
from typing import Optional

from ..attendance.repository import AttendanceRepository
from ..common.datetime_utils import now_local, start_of_day, start_of_week, to_local
from ..settings.grace_period import GracePeriodStore
from .scheduler import AutoAbsenceScheduler
from .sweep import SweepResult
from .trigger import ResilientTrigger


class AutoAbsenceService:
    """Administrative facade over the auto-absence engine."""

    def __init__(
        self,
        trigger: ResilientTrigger,
        grace_period: GracePeriodStore,
        attendance: AttendanceRepository,
        *,
        scheduler: Optional[AutoAbsenceScheduler] = None,
        tz: tzinfo | None = None,
    ):
        self._trigger = trigger
        self._grace_period = grace_period
        self._attendance = attendance
        self._scheduler = scheduler
        self._tz = tz

    def _now(self, now: datetime | None) -> datetime:
        return to_local(now, self._tz) if now else now_local(self._tz)

    def run_now(self, now: datetime | None = None) -> SweepResult:
        return self._trigger.run_now(now)

    def get_grace_period(self) -> int:
        return self._grace_period.get()

    def set_grace_period(self, minutes: int) -> bool:
        return self._grace_period.set(minutes)

    def stats(self, now: datetime | None = None) -> dict:
        now = self._now(now)
        today = now.date()
        # marked_at is stored as naive local time.
        day_start = start_of_day(today)
        day_end = day_start + timedelta(days=1)
        week_start = start_of_day(start_of_week(today))
        month_start = start_of_day(today.replace(day=1))

        count = self._attendance.count_auto_absent_marked_between
        return {
            "today_marked": count(start=day_start, end=day_end),
            "week_marked": count(start=week_start, end=day_end),
            "month_marked": count(start=month_start, end=day_end),
            "overrides": self._attendance.count_overridden(),
        }

    def status(self, now: datetime | None = None) -> dict:
        now = self._now(now)
        day_start = start_of_day(now.date())
        scheduler_status = self._scheduler.status() if self._scheduler else None
        last_run = self._trigger.last_run()

        return {
            "grace_period": self._grace_period.get(),
            "sweep_interval_minutes": int(self._trigger.interval.total_seconds() // 60),
            "is_scheduler_running": bool(scheduler_status and scheduler_status.is_running),
            "next_run": scheduler_status.next_run.isoformat() if scheduler_status and scheduler_status.next_run else None,
            "last_run": last_run.isoformat() if last_run else None,
            "today_marked": self._attendance.count_auto_absent_marked_between(
                start=day_start, end=day_start + timedelta(days=1)
            ),
            "total_auto_absent": self._attendance.count_auto_absent(),
        }
