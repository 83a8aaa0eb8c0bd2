import os

from config.config import *  # noqa: F401,F403

SECRET_KEY = "test-secret"

DB_CONFIG = {
    "host": os.getenv("DB_HOST", "localhost"),
    "port": int(os.getenv("DB_PORT", "3306")),
    "user": os.getenv("DB_USER", "root"),
    "password": os.getenv("DB_PASSWORD", ""),
    "database": os.getenv("DB_NAME", "tutoring_attendance_test"),
}

DEBUG = False
TESTING = True

AUTO_INIT_DB = False
AUTO_ABSENCE_ON_REQUEST = False
AUTO_ABSENCE_SCHEDULER = False
RUN_MARKER_BACKEND = "settings"
