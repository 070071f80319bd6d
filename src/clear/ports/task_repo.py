"""Task repository interface."""

from datetime import datetime
from typing import Protocol

from clear.core.tasks import Task, TaskCandidate, TaskStatus


class TaskRepository(Protocol):
    """Interface for storing and querying a user's tasks."""

    def create_task(self, user_id: str, candidate: TaskCandidate, now: datetime) -> Task:
        """Store a new open task from an extractor candidate."""
        ...

    def get_task(self, user_id: str, task_id: str) -> Task | None:
        """Fetch a task owned by user_id. None if missing or foreign."""
        ...

    def list_tasks(self, user_id: str, statuses: list[TaskStatus] | None = None) -> list[Task]:
        """List a user's tasks, optionally restricted to some statuses."""
        ...

    def update_neglect(self, task_id: str, neglect_score: float) -> None:
        """Persist a recomputed neglect score."""
        ...

    def mark_seen(self, user_id: str, task_ids: list[str], now: datetime) -> None:
        """Refresh last_seen_at for the given tasks."""
        ...

    def update_text(self, user_id: str, task_id: str, text: str) -> bool:
        """Change canonical text of a non-archived task. False if not found."""
        ...

    def archive(self, user_id: str, task_id: str) -> bool:
        """Archive a non-archived task. False if not found."""
        ...
