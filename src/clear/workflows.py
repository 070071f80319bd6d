"""Shared workflow layer between the CLI and the scheduler.

Wires config to adapters and runs the composite operations: refocus,
lazy focus reads, and the per-user background cycle.
"""

import logging
from datetime import date, datetime
from typing import Callable

from .adapters.claude_cli import ClaudeCLIService
from .adapters.extractors import LineExtractor, LLMTaskExtractor
from .adapters.gemini_api import GeminiService
from .adapters.sqlite_store import SqliteStore
from .clock import local_today, utc_now
from .config import Config
from .core.focus import DailyFocus, ResolvedFocus, resolve_slot
from .core.report import BatchReport
from .decider import generate_daily_focus
from .intake import process_dumps
from .ports.extractor import TaskExtractor
from .ports.store import Store
from .scorer import score_tasks

logger = logging.getLogger(__name__)


def get_store(config: Config) -> SqliteStore:
    """Open the configured database."""
    return SqliteStore(config.database_path)


def get_extractor(config: Config) -> TaskExtractor:
    """Build the configured extractor."""
    match config.extractor:
        case "gemini":
            return LLMTaskExtractor(GeminiService(config.gemini_api_key, config.gemini_model))
        case "lines":
            return LineExtractor()
        case _:
            return LLMTaskExtractor(ClaudeCLIService(timeout=config.claude_timeout))


def today_for(config: Config, now: datetime | None = None) -> date:
    return local_today(config.timezone, now)


def refocus(
    store: Store,
    extractor: TaskExtractor,
    user_id: str,
    today: date,
    now: datetime | None = None,
) -> DailyFocus | None:
    """
    Force a fresh focus set: intake, then scoring, then forced selection.

    The order matters: intake can create tasks that must be scored before
    they compete for a slot.
    """
    now = now or utc_now()
    process_dumps(store, extractor, user_id, today, now)
    score_tasks(store, user_id, now)
    return generate_daily_focus(store, user_id, today, now, force=True)


def resolve_focus(store: Store, focus: DailyFocus) -> ResolvedFocus:
    """Look up each slot. Archived or deleted tasks become None."""

    def lookup(task_id: str | None):
        if not task_id:
            return None
        return resolve_slot(store.get_task(focus.user_id, task_id))

    return ResolvedFocus(
        focus=focus,
        top_tasks=[lookup(tid) for tid in focus.top_task_ids],
        avoided_task=lookup(focus.avoided_task_id),
    )


def get_today_focus(
    store: Store,
    user_id: str,
    today: date,
    now: datetime | None = None,
) -> ResolvedFocus | None:
    """
    Read today's focus, generating it first if the day has none yet.

    Returns None only when there is nothing eligible to focus on.
    """
    focus = store.get_focus(user_id, today)
    if focus is None:
        generate_daily_focus(store, user_id, today, now, force=False)
        focus = store.get_focus(user_id, today)
    if focus is None:
        return None
    return resolve_focus(store, focus)


def focus_payload(resolved: ResolvedFocus | None) -> dict:
    """JSON shape of a focus read."""
    if resolved is None:
        return {"focus": None}
    return resolved.to_dict()


def run_daily_cycle(
    store: Store,
    extractor: TaskExtractor,
    user_id: str,
    today: date,
    now: datetime | None = None,
) -> DailyFocus | None:
    """Background cycle for one user: intake, scoring, non-forced selection."""
    now = now or utc_now()
    process_dumps(store, extractor, user_id, today, now)
    score_tasks(store, user_id, now)
    return generate_daily_focus(store, user_id, today, now, force=False)


def run_for_all_users(store: Store, job: Callable[[str], object], label: str) -> BatchReport:
    """
    Run job(user_id) for every known user.

    One user's exception is logged and counted; it never stops the others.
    """
    report = BatchReport()
    for user_id in store.list_user_ids():
        try:
            job(user_id)
            report.succeeded += 1
        except Exception:
            logger.exception(f"Error running {label} for user {user_id}")
            report.failed += 1

    logger.info(f"Finished {label}: {report.succeeded} user(s) ok, {report.failed} failed")
    return report
