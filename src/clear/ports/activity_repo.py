"""Task activity repository interface."""

from datetime import date, datetime
from typing import Protocol

from clear.core.tasks import ActivityEffect, Task, TaskActivity


class ActivityRepository(Protocol):
    """Interface for the append-only activity log."""

    def apply_activity(
        self,
        user_id: str,
        task_id: str,
        effect: ActivityEffect,
        day: date,
        now: datetime,
    ) -> Task | None:
        """
        Atomically apply an activity effect to an owned, non-archived task.

        Returns the updated task, or None if the task is missing or foreign.
        """
        ...

    def list_activity(self, user_id: str, task_id: str | None = None) -> list[TaskActivity]:
        """List log entries, oldest first."""
        ...
