"""Task extractor interface."""

from datetime import date
from typing import Protocol

from clear.core.tasks import TaskCandidate


class TaskExtractor(Protocol):
    """Turns raw free text into task candidates. Raises ExtractionError on failure."""

    def extract(self, text: str, current_date: date) -> list[TaskCandidate]:
        ...
