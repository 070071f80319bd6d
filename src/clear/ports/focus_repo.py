"""Daily focus repository interface."""

from datetime import date
from typing import Protocol

from clear.core.focus import DailyFocus


class FocusRepository(Protocol):
    """Interface for the one-per-(user, date) DailyFocus record."""

    def get_focus(self, user_id: str, day: date) -> DailyFocus | None:
        """Read the focus for a day. None if not generated yet."""
        ...

    def insert_focus(self, focus: DailyFocus) -> bool:
        """Insert unless one already exists. False if another writer won."""
        ...

    def delete_focus(self, user_id: str, day: date) -> None:
        """Remove the focus for a day, if any."""
        ...
