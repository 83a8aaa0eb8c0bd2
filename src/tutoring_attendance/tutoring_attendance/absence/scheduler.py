from __future__ import annotations

import logging
import threading
from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from apscheduler.schedulers.background import BackgroundScheduler

from ..core.constants import DEFAULT_SWEEP_INTERVAL_MINUTES
from .trigger import ResilientTrigger

logger = logging.getLogger(__name__)

JOB_ID = "auto_absence_sweep"


@dataclass(frozen=True)
class SchedulerStatus:
    is_running: bool
    interval_minutes: int
    next_run: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "is_running": self.is_running,
            "interval_minutes": self.interval_minutes,
            "next_run": self.next_run.isoformat() if self.next_run else None,
        }


class AutoAbsenceScheduler:
    """Interval ticker for hosts that keep a long-running process.

    Each tick goes through the trigger, so the durable marker still decides
    whether a sweep is due and restarts never cause a burst of sweeps.
    """

    def __init__(
        self,
        trigger: ResilientTrigger,
        *,
        interval_minutes: int = DEFAULT_SWEEP_INTERVAL_MINUTES,
        timezone=None,
    ):
        self._trigger = trigger
        self._interval_minutes = int(interval_minutes)
        self._timezone = timezone
        self._scheduler: Optional[BackgroundScheduler] = None
        self._lock = threading.Lock()

    @property
    def is_running(self) -> bool:
        return self._scheduler is not None

    def _tick(self) -> None:
        try:
            self._trigger.maybe_run()
        except Exception:
            logger.exception("Scheduled auto-absence check failed")

    def start(self) -> bool:
        with self._lock:
            if self._scheduler is not None:
                logger.info("Auto-absence scheduler already running")
                return False

            scheduler = BackgroundScheduler(timezone=self._timezone) if self._timezone else BackgroundScheduler()
            scheduler.add_job(
                self._tick,
                "interval",
                minutes=self._interval_minutes,
                id=JOB_ID,
                replace_existing=True,
                max_instances=1,
                coalesce=True,
                next_run_time=datetime.now(scheduler.timezone),
            )
            scheduler.start()
            self._scheduler = scheduler

        logger.info("Auto-absence scheduler started (runs every %s minutes)", self._interval_minutes)
        return True

    def stop(self) -> bool:
        with self._lock:
            if self._scheduler is None:
                return False
            self._scheduler.shutdown(wait=False)
            self._scheduler = None

        logger.info("Auto-absence scheduler stopped")
        return True

    def status(self) -> SchedulerStatus:
        scheduler = self._scheduler
        next_run = None
        if scheduler is not None:
            job = scheduler.get_job(JOB_ID)
            next_run = job.next_run_time if job else None
        return SchedulerStatus(
            is_running=scheduler is not None,
            interval_minutes=self._interval_minutes,
            next_run=next_run,
        )
