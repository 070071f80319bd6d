"""Batch outcome counters - no I/O dependencies."""

from dataclasses import dataclass


@dataclass
class BatchReport:
    """How many items of a batch succeeded or failed. Failures never abort a batch."""

    succeeded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed
