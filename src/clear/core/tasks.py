"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum

from clear.errors import ValidationError


class TaskStatus(Enum):
    """Task lifecycle status. ARCHIVED is terminal."""

    OPEN = "open"
    DONE = "done"
    ARCHIVED = "archived"


class ActivityType(Enum):
    """Interactions a user can apply to a task."""

    TOUCHED = "touched"
    DONE = "done"
    UNDO = "undo"

    @property
    def is_logged(self) -> bool:
        """Undo compensates the log instead of appending to it."""
        return self is not ActivityType.UNDO


@dataclass
class Task:
    """A captured task with its three independent scores."""

    id: str
    user_id: str
    canonical_text: str
    created_at: datetime
    last_seen_at: datetime
    pressure_score: float = 0.0
    leverage_score: float = 0.0
    neglect_score: float = 0.0
    scheduled_date: date | None = None
    status: TaskStatus = TaskStatus.OPEN
    repeat_count: int = 1

    @property
    def is_open(self) -> bool:
        return self.status is TaskStatus.OPEN

    @property
    def is_archived(self) -> bool:
        return self.status is TaskStatus.ARCHIVED

    def is_scheduled_for(self, day: date) -> bool:
        return self.scheduled_date == day

    def is_eligible(self, today: date) -> bool:
        """Open and not pinned to a future day."""
        if not self.is_open:
            return False
        return self.scheduled_date is None or self.scheduled_date <= today

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "canonicalText": self.canonical_text,
            "createdAt": self.created_at.isoformat(),
            "lastSeenAt": self.last_seen_at.isoformat(),
            "repeatCount": self.repeat_count,
            "pressureScore": self.pressure_score,
            "leverageScore": self.leverage_score,
            "neglectScore": self.neglect_score,
            "scheduledDate": self.scheduled_date.isoformat() if self.scheduled_date else None,
            "status": self.status.value,
        }


@dataclass(frozen=True)
class TaskCandidate:
    """Extractor output: a task that has not been stored yet."""

    text: str
    pressure: float
    leverage: float
    scheduled_date: date | None = None


@dataclass(frozen=True)
class TaskActivity:
    """Append-only interaction log entry."""

    id: str
    task_id: str
    user_id: str
    date: date
    activity_type: ActivityType
    timestamp: datetime


@dataclass(frozen=True)
class ActivityEffect:
    """What applying an activity does to a task and its log."""

    append: ActivityType | None
    new_status: TaskStatus | None
    delete_latest_done: bool = False


def parse_activity_type(raw: str) -> ActivityType:
    """Parse a user-supplied activity type. Raises ValidationError if unknown."""
    try:
        return ActivityType((raw or "").strip().lower())
    except ValueError:
        raise ValidationError(f"Invalid activity type: {raw!r}") from None


def activity_effect(activity: ActivityType) -> ActivityEffect:
    """
    Decide how an activity mutates state.

    Every activity also refreshes last_seen_at; that part is not represented
    here because it is unconditional.
    """
    append = activity if activity.is_logged else None
    match activity:
        case ActivityType.DONE:
            return ActivityEffect(append=append, new_status=TaskStatus.DONE)
        case ActivityType.UNDO:
            return ActivityEffect(append=append, new_status=TaskStatus.OPEN, delete_latest_done=True)
        case _:
            return ActivityEffect(append=append, new_status=None)


def filter_eligible(tasks: list[Task], today: date) -> list[Task]:
    """Tasks allowed to compete for today's focus."""
    return [t for t in tasks if t.is_eligible(today)]

