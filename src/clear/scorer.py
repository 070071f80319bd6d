"""Neglect scoring for a user's open tasks."""

import logging
from datetime import datetime

from .clock import utc_now
from .core.report import BatchReport
from .core.scoring import neglect_score
from .core.tasks import TaskStatus
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)


def score_tasks(tasks: TaskRepository, user_id: str, now: datetime | None = None) -> BatchReport:
    """
    Recompute neglect_score for every open task of a user.

    Each task is written independently: a failed update is logged and
    counted, and the remaining tasks are still scored. Pressure and leverage
    are never touched here.
    """
    now = now or utc_now()
    report = BatchReport()

    for task in tasks.list_tasks(user_id, [TaskStatus.OPEN]):
        try:
            tasks.update_neglect(task.id, neglect_score(task.created_at, task.last_seen_at, now))
            report.succeeded += 1
        except Exception:
            logger.exception(f"Failed to score task {task.id}")
            report.failed += 1

    if report.failed:
        logger.warning(f"Scoring for user {user_id}: {report.succeeded} ok, {report.failed} failed")
    else:
        logger.info(f"Scored {report.succeeded} task(s) for user {user_id}")
    return report
