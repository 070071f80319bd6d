"""Settings repository interface."""

from typing import Protocol


class SettingsRepository(Protocol):
    """Interface for per-user key/value settings."""

    def get_settings(self, user_id: str) -> dict[str, str]:
        """All stored settings for a user."""
        ...

    def set_setting(self, user_id: str, key: str, value: str) -> None:
        """Insert or replace one setting."""
        ...
