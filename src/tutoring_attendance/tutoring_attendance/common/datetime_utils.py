from __future__ import annotations

from datetime import date, datetime, time, timedelta, tzinfo
from zoneinfo import ZoneInfo


def parse_iso_date(value: str) -> date:
    """Parse YYYY-MM-DD string into date."""
    return datetime.strptime(value, "%Y-%m-%d").date()


def get_timezone(name: str) -> ZoneInfo:
    return ZoneInfo(name)


def now_local(tz: tzinfo | None = None) -> datetime:
    """Current local time in ``tz`` (naive server time when ``tz`` is None).

    Note: Wrapped so tests can patch/mocked easier.
    """
    if tz is None:
        return datetime.now()
    return datetime.now(tz)


def to_local(value: datetime, tz: tzinfo | None) -> datetime:
    """Express ``value`` in ``tz``. Naive datetimes are taken as already local."""
    if tz is None or value.tzinfo is None:
        return value
    return value.astimezone(tz)


def minutes_since_midnight(value: datetime) -> int:
    return value.hour * 60 + value.minute


def start_of_day(day: date) -> datetime:
    return datetime.combine(day, time.min)


def start_of_week(day: date) -> date:
    """Sunday that starts the week containing ``day``."""
    return day - timedelta(days=day.isoweekday() % 7)


def naive(value: datetime) -> datetime:
    """Drop tzinfo so the value fits a MySQL DATETIME column."""
    return value.replace(tzinfo=None)
