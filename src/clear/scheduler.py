"""Background jobs: periodic intake and the daily focus cycle."""

import logging

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger
from apscheduler.triggers.interval import IntervalTrigger

from .clock import utc_now
from .config import Config, load_config
from .core.report import BatchReport
from .intake import process_dumps
from .ports.extractor import TaskExtractor
from .ports.store import Store
from .workflows import get_extractor, get_store, run_daily_cycle, run_for_all_users, today_for

logger = logging.getLogger(__name__)


def run_intake_job(store: Store, extractor: TaskExtractor, config: Config) -> BatchReport:
    """Process pending dumps for every user."""
    logger.info("Running scheduled dump processing...")
    now = utc_now()
    today = today_for(config, now)
    return run_for_all_users(
        store,
        lambda user_id: process_dumps(store, extractor, user_id, today, now),
        "dump processing",
    )


def run_daily_focus_job(store: Store, extractor: TaskExtractor, config: Config) -> BatchReport:
    """Intake, scoring and non-forced focus generation for every user."""
    logger.info("Running scheduled daily focus generation...")
    now = utc_now()
    today = today_for(config, now)
    return run_for_all_users(
        store,
        lambda user_id: run_daily_cycle(store, extractor, user_id, today, now),
        "daily focus generation",
    )


def setup_scheduler(
    store: Store,
    extractor: TaskExtractor,
    config: Config | None = None,
) -> BlockingScheduler:
    """Set up the intake and daily focus jobs."""
    if config is None:
        config = load_config()

    scheduler = BlockingScheduler(timezone=config.timezone or "UTC")

    minutes = max(1, config.intake_interval_minutes)
    scheduler.add_job(
        run_intake_job,
        IntervalTrigger(minutes=minutes),
        args=[store, extractor, config],
        id="intake",
        max_instances=1,
        coalesce=True,
    )
    logger.info(f"Scheduled dump processing every {minutes} minute(s)")

    try:
        hour, minute = map(int, config.focus_time.split(":"))
        scheduler.add_job(
            run_daily_focus_job,
            CronTrigger(hour=hour, minute=minute, timezone=config.timezone or "UTC"),
            args=[store, extractor, config],
            id="daily_focus",
            max_instances=1,
            coalesce=True,
        )
        logger.info(f"Scheduled daily focus at {hour:02d}:{minute:02d}")
    except ValueError:
        logger.warning(f"Invalid focus time format: {config.focus_time}")

    return scheduler


def run_scheduler(config: Config | None = None) -> None:
    """Run the background scheduler until interrupted."""
    if config is None:
        config = load_config()

    store = get_store(config)
    extractor = get_extractor(config)
    scheduler = setup_scheduler(store, extractor, config)

    logger.info("Scheduler started")
    scheduler.start()
