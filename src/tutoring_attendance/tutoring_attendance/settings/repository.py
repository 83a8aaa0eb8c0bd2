from __future__ import annotations

from typing import Optional, Protocol


class SettingsRepository(Protocol):
    """Generic key/value admin settings."""

    def get(self, key: str) -> Optional[str]:
        raise NotImplementedError

    def set(self, key: str, value: str) -> None:
        raise NotImplementedError
