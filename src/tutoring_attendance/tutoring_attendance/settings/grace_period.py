from __future__ import annotations

import logging

from ..common.validators import clamp
from ..core.constants import DEFAULT_GRACE_MINUTES, GRACE_PERIOD_SETTING_KEY, MAX_GRACE_MINUTES, MIN_GRACE_MINUTES
from ..core.exceptions import StorageError
from .repository import SettingsRepository

logger = logging.getLogger(__name__)


def clamp_grace_minutes(value: int) -> int:
    return clamp(int(value), MIN_GRACE_MINUTES, MAX_GRACE_MINUTES)


class GracePeriodStore:
    """Minutes after a session starts before an unmarked student is auto-absent."""

    def __init__(self, settings: SettingsRepository, *, key: str = GRACE_PERIOD_SETTING_KEY):
        self._settings = settings
        self._key = key

    def get(self) -> int:
        try:
            raw = self._settings.get(self._key)
        except StorageError:
            logger.exception("Could not read grace period, using default of %s minutes", DEFAULT_GRACE_MINUTES)
            return DEFAULT_GRACE_MINUTES

        if raw is None:
            return DEFAULT_GRACE_MINUTES
        try:
            return clamp_grace_minutes(int(str(raw).strip()))
        except ValueError:
            logger.warning("Ignoring unparsable grace period %r", raw)
            return DEFAULT_GRACE_MINUTES

    def set(self, minutes: int) -> bool:
        value = clamp_grace_minutes(minutes)
        try:
            self._settings.set(self._key, str(value))
        except StorageError:
            logger.exception("Could not save grace period")
            return False
        logger.info("Grace period set to %s minutes", value)
        return True
