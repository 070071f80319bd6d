"""Dump entry repository interface."""

from datetime import datetime
from typing import Protocol

from clear.core.intake import DumpEntry
from clear.core.tasks import Task, TaskCandidate


class DumpRepository(Protocol):
    """Interface for raw free-text dumps awaiting extraction."""

    def add_dump(self, user_id: str, content: str) -> DumpEntry:
        """Store a new unprocessed dump."""
        ...

    def list_dumps(self, user_id: str) -> list[DumpEntry]:
        """All dumps for a user, newest first."""
        ...

    def list_unprocessed(self, user_id: str) -> list[DumpEntry]:
        """Dumps not yet extracted, oldest first."""
        ...

    def store_extraction(
        self,
        dump_id: str,
        user_id: str,
        candidates: list[TaskCandidate],
        now: datetime,
    ) -> list[Task] | None:
        """
        Atomically create a dump's tasks and mark it processed.

        Returns None if the dump was already processed.
        """
        ...
