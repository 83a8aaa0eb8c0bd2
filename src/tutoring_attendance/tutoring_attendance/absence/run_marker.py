"""Durable "last completed sweep" timestamp.

The marker must survive process restarts, so it never lives in memory only.
Readers treat anything missing or unreadable as "never run".
"""

from __future__ import annotations

import logging
import os
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Optional, Protocol

from ..core.constants import LAST_RUN_SETTING_KEY
from ..core.exceptions import StorageError
from ..settings.repository import SettingsRepository

logger = logging.getLogger(__name__)


class RunMarker(Protocol):
    def read(self) -> Optional[datetime]:
        raise NotImplementedError

    def write(self, when: datetime) -> None:
        raise NotImplementedError


def _parse(raw: str | None) -> Optional[datetime]:
    if not raw:
        return None
    try:
        return datetime.fromisoformat(raw.strip())
    except ValueError:
        logger.warning("Ignoring unparsable last-run marker %r", raw)
        return None


class FileRunMarker(RunMarker):
    def __init__(self, path: str | Path):
        self._path = Path(path)

    def read(self) -> Optional[datetime]:
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError:
            logger.warning("Could not read last-run marker %s", self._path, exc_info=True)
            return None
        return _parse(raw)

    def write(self, when: datetime) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        # Write-then-rename so a concurrent reader never sees a half-written file.
        fd, tmp = tempfile.mkstemp(dir=self._path.parent, prefix=".last_run.")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as fh:
                fh.write(when.isoformat())
            os.replace(tmp, self._path)
        except BaseException:
            try:
                os.unlink(tmp)
            except OSError:
                pass
            raise


class SettingsRunMarker(RunMarker):
    def __init__(self, settings: SettingsRepository, *, key: str = LAST_RUN_SETTING_KEY):
        self._settings = settings
        self._key = key

    def read(self) -> Optional[datetime]:
        try:
            return _parse(self._settings.get(self._key))
        except StorageError:
            logger.warning("Could not read last-run marker from settings", exc_info=True)
            return None

    def write(self, when: datetime) -> None:
        self._settings.set(self._key, when.isoformat())
