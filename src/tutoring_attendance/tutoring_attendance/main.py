from __future__ import annotations

import importlib
import logging
from pathlib import Path

from dotenv import load_dotenv
from flask import Flask, jsonify

from config import get_settings_module

from .absence.controller import register as register_auto_absence
from .attendance.controller import register as register_attendance
from .common.logger import configure_logging
from .container import build_container
from .database.bootstrap import apply_schema, list_tables

logger = logging.getLogger(__name__)


def create_app() -> Flask:
    load_dotenv(override=False)
    app = Flask(__name__)

    settings_module = get_settings_module()
    settings = importlib.import_module(settings_module)
    app.secret_key = getattr(settings, "SECRET_KEY")
    db_config = getattr(settings, "DB_CONFIG")
    app.config["DEBUG"] = bool(getattr(settings, "DEBUG", False))

    configure_logging(getattr(settings, "LOG_LEVEL", "INFO"), getattr(settings, "LOG_DIR", None))
    logger.info(
        "settings=%s db=%s@%s:%s/%s",
        settings_module,
        db_config.get("user"),
        db_config.get("host"),
        db_config.get("port", 3306),
        db_config.get("database"),
    )

    if bool(getattr(settings, "AUTO_INIT_DB", False)):
        schema_path = Path(__file__).resolve().parents[3] / "database" / "schema.sql"
        apply_schema(db_config, schema_path=schema_path)
        logger.info("schema ready (tables=%s)", len(list_tables(db_config)))

    container = build_container(
        db_config=db_config,
        timezone=getattr(settings, "TIMEZONE"),
        sweep_interval_minutes=int(getattr(settings, "SWEEP_INTERVAL_MINUTES")),
        run_marker_backend=getattr(settings, "RUN_MARKER_BACKEND"),
        run_marker_path=getattr(settings, "RUN_MARKER_PATH", None),
    )
    app.extensions["tutoring_attendance"] = container

    register_attendance(app, container)
    register_auto_absence(app, container, trigger_on_request=bool(getattr(settings, "AUTO_ABSENCE_ON_REQUEST", True)))

    @app.route("/health", endpoint="health")
    def health():
        return jsonify({"status": "ok"})

    if bool(getattr(settings, "AUTO_ABSENCE_SCHEDULER", False)):
        container.scheduler.start()

    return app
