import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY") or "tutoring-attendance-secret"

    # Database
    DB_USER = os.environ.get("DB_USER", "root")
    DB_PASSWORD = os.environ.get("DB_PASSWORD", "")
    DB_HOST = os.environ.get("DB_HOST", "localhost")
    DB_PORT = int(os.environ.get("DB_PORT", "3306"))
    DB_NAME = os.environ.get("DB_NAME", "tutoring_attendance")

    # Auto-absence engine
    TIMEZONE = os.environ.get("TIMEZONE", "Africa/Cairo")
    SWEEP_INTERVAL_MINUTES = int(os.environ.get("SWEEP_INTERVAL_MINUTES", "5"))
    AUTO_ABSENCE_ON_REQUEST = bool(int(os.environ.get("AUTO_ABSENCE_ON_REQUEST", "1")))
    AUTO_ABSENCE_SCHEDULER = bool(int(os.environ.get("AUTO_ABSENCE_SCHEDULER", "0")))
    RUN_MARKER_BACKEND = os.environ.get("RUN_MARKER_BACKEND", "file")
    RUN_MARKER_PATH = os.environ.get("RUN_MARKER_PATH", os.path.join("instance", "auto_absence_last_run"))

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")
    LOG_DIR = os.environ.get("LOG_DIR") or None

    # Dev helpers
    AUTO_INIT_DB = bool(int(os.environ.get("AUTO_INIT_DB", "0")))


# Module-level settings consumed by create_app (mysql-connector dict)
SECRET_KEY = Config.SECRET_KEY
DB_CONFIG = {
    "host": Config.DB_HOST,
    "port": Config.DB_PORT,
    "user": Config.DB_USER,
    "password": Config.DB_PASSWORD,
    "database": Config.DB_NAME,
}

DEBUG = bool(int(os.environ.get("DEBUG", "1")))

TIMEZONE = Config.TIMEZONE
SWEEP_INTERVAL_MINUTES = Config.SWEEP_INTERVAL_MINUTES
AUTO_ABSENCE_ON_REQUEST = Config.AUTO_ABSENCE_ON_REQUEST
AUTO_ABSENCE_SCHEDULER = Config.AUTO_ABSENCE_SCHEDULER
RUN_MARKER_BACKEND = Config.RUN_MARKER_BACKEND
RUN_MARKER_PATH = Config.RUN_MARKER_PATH
LOG_LEVEL = Config.LOG_LEVEL
LOG_DIR = Config.LOG_DIR
AUTO_INIT_DB = Config.AUTO_INIT_DB
