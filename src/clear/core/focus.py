"""Pure daily focus selection - no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date

from .scoring import priority
from .tasks import Task, filter_eligible

MAX_SLOTS = 5


@dataclass
class DailyFocus:
    """
    One user's focus set for one calendar day.

    Slots hold task ids, not tasks: a slot may outlive its task and must be
    resolved at read time.
    """

    date: date
    user_id: str
    top_task_ids: list[str | None] = field(default_factory=lambda: [None] * MAX_SLOTS)
    avoided_task_id: str | None = None
    daily_directive: str = ""
    accepted: bool = False
    override_used: bool = False

    @property
    def selected_ids(self) -> list[str]:
        ids = [tid for tid in self.top_task_ids if tid]
        if self.avoided_task_id:
            ids.append(self.avoided_task_id)
        return ids


@dataclass
class FocusSelection:
    """Result of ranking candidates."""

    top: list[Task]
    avoided: Task | None

    @property
    def is_empty(self) -> bool:
        return not self.top

    @property
    def tasks(self) -> list[Task]:
        return self.top + ([self.avoided] if self.avoided else [])

    def to_focus(self, user_id: str, day: date, directive: str) -> DailyFocus:
        slots: list[str | None] = [t.id for t in self.top]
        slots += [None] * (MAX_SLOTS - len(slots))
        return DailyFocus(
            date=day,
            user_id=user_id,
            top_task_ids=slots,
            avoided_task_id=self.avoided.id if self.avoided else None,
            daily_directive=directive,
        )


@dataclass
class ResolvedFocus:
    """A DailyFocus with its slots looked up. Missing or archived tasks are None."""

    focus: DailyFocus
    top_tasks: list[Task | None]
    avoided_task: Task | None

    def to_dict(self) -> dict:
        data = {
            "date": self.focus.date.isoformat(),
            "dailyDirective": self.focus.daily_directive,
            "accepted": self.focus.accepted,
            "overrideUsed": self.focus.override_used,
            "avoidedTask": self.avoided_task.to_dict() if self.avoided_task else None,
        }
        for i, task in enumerate(self.top_tasks, start=1):
            data[f"topTask{i}"] = task.to_dict() if task else None
        return data


def rank_by_priority(tasks: list[Task], today: date) -> list[Task]:
    """
    Sort by priority descending.

    Ties fall back to task id so the order is reproducible.
    """
    return sorted(tasks, key=lambda t: (-priority(t, today), t.id))


def rank_by_neglect(tasks: list[Task]) -> list[Task]:
    return sorted(tasks, key=lambda t: (-t.neglect_score, t.id))


def select_focus(tasks: list[Task], today: date, count: int) -> FocusSelection:
    """
    Pick today's top tasks plus the most neglected leftover.

    Pure function - no I/O. Future-scheduled and non-open tasks are dropped
    before ranking. The avoided task is chosen by neglect alone, never by
    priority, and is never one of the top tasks.
    """
    count = max(1, min(MAX_SLOTS, int(count)))
    ranked = rank_by_priority(filter_eligible(tasks, today), today)
    top = ranked[:count]
    remaining = rank_by_neglect(ranked[count:])
    return FocusSelection(top=top, avoided=remaining[0] if remaining else None)


def resolve_slot(task: Task | None) -> Task | None:
    """Degrade archived tasks to an empty slot."""
    if task is None or task.is_archived:
        return None
    return task
