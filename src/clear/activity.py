"""Task interactions: touch, done, undo, edit, archive."""

import logging
from datetime import date, datetime

from .clock import utc_now
from .core.intake import validate_task_text
from .core.tasks import ActivityType, Task, activity_effect, parse_activity_type
from .errors import NotFoundError
from .ports.activity_repo import ActivityRepository
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)


def record_activity(
    activities: ActivityRepository,
    user_id: str,
    task_id: str,
    activity: ActivityType | str,
    today: date,
    now: datetime | None = None,
) -> Task:
    """
    Apply an interaction to a task the user owns.

    Every type refreshes last_seen_at. Unknown types raise ValidationError;
    missing, foreign or archived tasks raise NotFoundError.
    """
    if not isinstance(activity, ActivityType):
        activity = parse_activity_type(activity)
    now = now or utc_now()

    task = activities.apply_activity(user_id, task_id, activity_effect(activity), today, now)
    if task is None:
        raise NotFoundError(task_id)

    logger.info(f"Task {task_id} {activity.value} -> {task.status.value}")
    return task


def edit_task(tasks: TaskRepository, user_id: str, task_id: str, text: str) -> Task:
    """Change a task's text. Archived tasks cannot be edited."""
    text = validate_task_text(text)
    if not tasks.update_text(user_id, task_id, text):
        raise NotFoundError(task_id)
    task = tasks.get_task(user_id, task_id)
    if task is None:
        raise NotFoundError(task_id)
    return task


def archive_task(tasks: TaskRepository, user_id: str, task_id: str) -> None:
    """Soft-delete a task. Any focus slot pointing at it reads as empty afterwards."""
    if not tasks.archive(user_id, task_id):
        raise NotFoundError(task_id)
    logger.info(f"Task {task_id} archived")
