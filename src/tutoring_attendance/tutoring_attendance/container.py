from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from .absence.run_marker import FileRunMarker, RunMarker, SettingsRunMarker
from .absence.scheduler import AutoAbsenceScheduler
from .absence.service import AutoAbsenceService
from .absence.sweep import AutoAbsenceSweep
from .absence.trigger import ResilientTrigger
from .attendance.mysql_attendance_repository import MySQLAttendanceRepository
from .attendance.service import AttendanceService
from .common.datetime_utils import get_timezone
from .core.constants import DEFAULT_SWEEP_INTERVAL_MINUTES, DEFAULT_TIMEZONE
from .core.enums import RunMarkerBackend
from .database.connection import DBConfig, DatabaseConnection
from .settings.grace_period import GracePeriodStore
from .settings.mysql_settings_repository import MySQLSettingsRepository
from .students.mysql_student_repository import MySQLStudentRepository


@dataclass(frozen=True)
class Container:
    conn: DatabaseConnection

    students_repo: MySQLStudentRepository
    attendance_repo: MySQLAttendanceRepository
    settings_repo: MySQLSettingsRepository
    run_marker: RunMarker

    grace_period: GracePeriodStore
    attendance_service: AttendanceService
    sweep: AutoAbsenceSweep
    trigger: ResilientTrigger
    scheduler: AutoAbsenceScheduler
    auto_absence_service: AutoAbsenceService


def build_run_marker(
    backend: RunMarkerBackend | str,
    *,
    settings_repo: MySQLSettingsRepository,
    path: Optional[str | Path] = None,
) -> RunMarker:
    backend = RunMarkerBackend(str(getattr(backend, "value", backend)).lower())
    if backend is RunMarkerBackend.SETTINGS:
        return SettingsRunMarker(settings_repo)
    return FileRunMarker(path or Path("instance") / "auto_absence_last_run")


def build_container(
    *,
    db_config: dict,
    timezone: str = DEFAULT_TIMEZONE,
    sweep_interval_minutes: int = DEFAULT_SWEEP_INTERVAL_MINUTES,
    run_marker_backend: RunMarkerBackend | str = RunMarkerBackend.FILE,
    run_marker_path: Optional[str | Path] = None,
) -> Container:
    conn = DatabaseConnection.get_instance(DBConfig.from_dict(db_config))
    tz = get_timezone(timezone)

    students_repo = MySQLStudentRepository(conn)
    attendance_repo = MySQLAttendanceRepository(conn)
    settings_repo = MySQLSettingsRepository(conn)
    run_marker = build_run_marker(run_marker_backend, settings_repo=settings_repo, path=run_marker_path)

    grace_period = GracePeriodStore(settings_repo)
    attendance_service = AttendanceService(attendance_repo, students_repo, tz=tz)
    sweep = AutoAbsenceSweep(students_repo, attendance_service, grace_period, tz=tz)
    trigger = ResilientTrigger(sweep, run_marker, interval_minutes=sweep_interval_minutes, tz=tz)
    scheduler = AutoAbsenceScheduler(trigger, interval_minutes=sweep_interval_minutes, timezone=tz)
    auto_absence_service = AutoAbsenceService(
        trigger,
        grace_period,
        attendance_repo,
        scheduler=scheduler,
        tz=tz,
    )

    return Container(
        conn=conn,
        students_repo=students_repo,
        attendance_repo=attendance_repo,
        settings_repo=settings_repo,
        run_marker=run_marker,
        grace_period=grace_period,
        attendance_service=attendance_service,
        sweep=sweep,
        trigger=trigger,
        scheduler=scheduler,
        auto_absence_service=auto_absence_service,
    )
