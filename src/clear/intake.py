"""Intake: capture free-text dumps and turn them into tasks."""

import logging
from datetime import date, datetime

from .clock import utc_now
from .core.extraction import fallback_candidate
from .core.intake import DumpEntry, validate_content
from .core.report import BatchReport
from .core.tasks import TaskCandidate
from .errors import ExtractionError
from .ports.extractor import TaskExtractor
from .ports.store import Store

logger = logging.getLogger(__name__)


def submit_dump(store: Store, user_id: str, content: str) -> DumpEntry:
    """Store a dump for later extraction. Empty content raises ValidationError."""
    entry = store.add_dump(user_id, validate_content(content))
    logger.info(f"Dump {entry.id} captured for {user_id}")
    return entry


def extract_candidates(extractor: TaskExtractor, content: str, today: date) -> list[TaskCandidate]:
    """
    Turn one block of text into task candidates.

    If extraction fails a single fallback candidate is built from the
    truncated text, so a dump is never silently lost.
    """
    try:
        return extractor.extract(content, today)
    except ExtractionError as e:
        logger.error(f"Extraction failed, creating fallback task: {e}")
        return [fallback_candidate(content)]


def process_dumps(
    store: Store,
    extractor: TaskExtractor,
    user_id: str,
    today: date,
    now: datetime | None = None,
) -> BatchReport:
    """
    Extract every unprocessed dump of a user.

    A dump's tasks and its processed flag are written together, so a
    failing dump leaves no partial tasks behind. It stays unprocessed for
    the next run and does not stop the others.
    """
    now = now or utc_now()
    report = BatchReport()

    pending = store.list_unprocessed(user_id)
    if not pending:
        logger.debug(f"No unprocessed dumps for {user_id}")
        return report

    for dump in pending:
        try:
            candidates = extract_candidates(extractor, dump.content, today)
            created = store.store_extraction(dump.id, user_id, candidates, now)
            if created is None:
                logger.info(f"Dump {dump.id} was already processed")
            else:
                for task in created:
                    logger.info(f"Created task: {task.canonical_text}")
            report.succeeded += 1
        except Exception:
            logger.exception(f"Failed to process dump {dump.id}")
            report.failed += 1

    logger.info(f"Processed {report.succeeded}/{report.total} dump(s) for {user_id}")
    return report
