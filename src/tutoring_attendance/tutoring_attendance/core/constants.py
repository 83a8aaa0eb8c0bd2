"""Constants and defaults.

Note: Keep constants here to avoid magic numbers spread across code.
"""

DEFAULT_GRACE_MINUTES = 15
MIN_GRACE_MINUTES = 5
MAX_GRACE_MINUTES = 60

DEFAULT_SWEEP_INTERVAL_MINUTES = 5
DEFAULT_TIMEZONE = "Africa/Cairo"

GRACE_PERIOD_SETTING_KEY = "AUTO_ABSENCE_GRACE_PERIOD"
LAST_RUN_SETTING_KEY = "AUTO_ABSENCE_LAST_RUN"

SYSTEM_ACTOR = "SYSTEM"
AUTO_ABSENCE_NOTE = "Auto-marked absent after {grace} minute grace period"
OVERRIDE_NOTE = "Auto-absence overridden to present"
