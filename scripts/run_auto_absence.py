"""Run the auto-absence sweep once from the command line.

Usable from cron on hosts without a long-running process. ``--if-due`` only
sweeps when the last-run marker is older than the configured interval.
"""

from __future__ import annotations

import argparse
import importlib
import json
import sys
from pathlib import Path

REPO_ROOT = Path(__file__).resolve().parents[1]
if str(REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(REPO_ROOT))

from dotenv import load_dotenv

from config import get_settings_module

from src.tutoring_attendance.tutoring_attendance.common.logger import configure_logging
from src.tutoring_attendance.tutoring_attendance.container import build_container
from src.tutoring_attendance.tutoring_attendance.core.exceptions import StorageError


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--if-due", action="store_true", help="skip when the last sweep is recent")
    args = parser.parse_args(argv)

    load_dotenv(override=False)
    settings = importlib.import_module(get_settings_module())
    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_DIR", None))

    container = build_container(
        db_config=dict(settings.DB_CONFIG),
        timezone=settings.TIMEZONE,
        sweep_interval_minutes=int(settings.SWEEP_INTERVAL_MINUTES),
        run_marker_backend=settings.RUN_MARKER_BACKEND,
        run_marker_path=getattr(settings, "RUN_MARKER_PATH", None),
    )

    if args.if_due:
        result = container.trigger.maybe_run()
        if result is None:
            print("Skipped: not due yet (or storage unavailable, see log)")
            return 0
    else:
        try:
            result = container.auto_absence_service.run_now()
        except StorageError as e:
            print(f"FAILED: {e}", file=sys.stderr)
            return 1

    print(json.dumps(result.to_dict(), ensure_ascii=False, indent=2))
    return 1 if result.errors else 0


if __name__ == "__main__":
    sys.exit(main())
