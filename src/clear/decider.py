"""Daily focus generation: rank, select, persist."""

import logging
from datetime import date, datetime

from .clock import utc_now
from .core.focus import DailyFocus, select_focus
from .core.settings import FocusSettings
from .core.tasks import TaskStatus
from .ports.store import Store

logger = logging.getLogger(__name__)


def generate_daily_focus(
    store: Store,
    user_id: str,
    today: date,
    now: datetime | None = None,
    force: bool = False,
) -> DailyFocus | None:
    """
    Produce and persist the focus set for (user_id, today).

    Without force, an existing focus for the day makes this a no-op. With
    force, the day's focus is deleted and rebuilt from current scores. No
    row is written when the user has no eligible tasks.

    Returns the newly stored focus, or None if nothing was written.
    """
    now = now or utc_now()

    if store.get_focus(user_id, today) is not None:
        if not force:
            logger.info(f"Daily focus for {user_id} on {today} already exists")
            return None
        store.delete_focus(user_id, today)
        logger.info(f"Discarded daily focus for {user_id} on {today}")

    settings = FocusSettings.from_mapping(store.get_settings(user_id))
    open_tasks = store.list_tasks(user_id, [TaskStatus.OPEN])
    selection = select_focus(open_tasks, today, settings.focus_count)

    if selection.is_empty:
        logger.info(f"No eligible tasks to schedule for {user_id}")
        return None

    focus = selection.to_focus(user_id, today, settings.directive)
    if not store.insert_focus(focus):
        # A concurrent writer created the row first; theirs stands.
        logger.info(f"Daily focus for {user_id} on {today} was created concurrently")
        return None

    store.mark_seen(user_id, [t.id for t in selection.tasks], now)
    logger.info(f"Daily focus generated for {user_id}: {len(selection.top)} top, avoided={focus.avoided_task_id}")
    return focus
