from __future__ import annotations

import logging
from datetime import datetime, timedelta, tzinfo
from typing import Optional

from ..common.datetime_utils import now_local, to_local
from ..core.constants import DEFAULT_SWEEP_INTERVAL_MINUTES
from ..core.exceptions import StorageError
from .run_marker import RunMarker
from .sweep import AutoAbsenceSweep, SweepResult

logger = logging.getLogger(__name__)


class ResilientTrigger:
    """Run the sweep at most once per interval, judged by a durable marker.

    Meant to be called from busy code paths (e.g. every request). Cadence
    therefore follows traffic: with no calls there are no sweeps. Two
    overlapping calls may both decide to run; the attendance table's
    composite key keeps that harmless.
    """

    def __init__(
        self,
        sweep: AutoAbsenceSweep,
        marker: RunMarker,
        *,
        interval_minutes: int = DEFAULT_SWEEP_INTERVAL_MINUTES,
        tz: tzinfo | None = None,
    ):
        self._sweep = sweep
        self._marker = marker
        self._interval = timedelta(minutes=int(interval_minutes))
        self._tz = tz

    @property
    def interval(self) -> timedelta:
        return self._interval

    def _now(self, now: datetime | None) -> datetime:
        return to_local(now, self._tz) if now else now_local(self._tz)

    def last_run(self) -> Optional[datetime]:
        return self._marker.read()

    def is_due(self, now: datetime | None = None) -> bool:
        last = self.last_run()
        if last is None:
            return True
        now = self._now(now)
        try:
            elapsed = now - last
        except TypeError:
            # Marker written with a different tz-awareness than the clock.
            elapsed = now.replace(tzinfo=None) - last.replace(tzinfo=None)
        return elapsed > self._interval

    def _run(self, now: datetime) -> SweepResult:
        result = self._sweep.run(now)
        self._marker.write(now)
        return result

    def maybe_run(self, now: datetime | None = None) -> Optional[SweepResult]:
        now = self._now(now)
        if not self.is_due(now):
            return None
        try:
            return self._run(now)
        except StorageError:
            logger.exception("Auto-absence sweep failed, deferring to the next trigger")
            return None

    def run_now(self, now: datetime | None = None) -> SweepResult:
        return self._run(self._now(now))
