import os

from config.config import *  # noqa: F401,F403

SECRET_KEY = os.getenv("SECRET_KEY", "please-set-SECRET_KEY")

DEBUG = False
LOG_DIR = os.getenv("LOG_DIR", "logs")

# Hosts without a long-lived worker rely on the per-request trigger; enable the
# interval scheduler only where a process is guaranteed to stay up.
AUTO_ABSENCE_SCHEDULER = bool(int(os.getenv("AUTO_ABSENCE_SCHEDULER", "0")))
