from __future__ import annotations

import pytest

from src.tutoring_attendance.tutoring_attendance.absence.scheduler import AutoAbsenceScheduler


class CountingTrigger:
    def __init__(self, exc: Exception | None = None):
        self.calls = 0
        self._exc = exc

    def maybe_run(self, now=None):
        self.calls += 1
        if self._exc:
            raise self._exc
        return None


@pytest.fixture
def scheduler():
    s = AutoAbsenceScheduler(CountingTrigger(), interval_minutes=5)
    yield s
    s.stop()


def test_not_running_until_started(scheduler):
    status = scheduler.status()

    assert status.is_running is False
    assert status.next_run is None
    assert status.to_dict() == {"is_running": False, "interval_minutes": 5, "next_run": None}


def test_start_and_stop(scheduler):
    assert scheduler.start() is True
    assert scheduler.is_running
    assert scheduler.status().interval_minutes == 5

    assert scheduler.stop() is True
    assert not scheduler.is_running
    assert scheduler.stop() is False


def test_second_start_is_a_no_op(scheduler):
    assert scheduler.start() is True
    assert scheduler.start() is False
    assert scheduler.is_running


def test_tick_goes_through_trigger():
    trigger = CountingTrigger()
    s = AutoAbsenceScheduler(trigger)

    s._tick()

    assert trigger.calls == 1


def test_tick_never_raises():
    trigger = CountingTrigger(exc=RuntimeError("boom"))
    s = AutoAbsenceScheduler(trigger)

    s._tick()

    assert trigger.calls == 1
