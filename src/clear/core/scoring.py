"""Pure scoring logic - no I/O dependencies."""

from datetime import date, datetime

from .tasks import Task

AGE_WEIGHT = 0.1
SINCE_SEEN_WEIGHT = 0.05

PRESSURE_WEIGHT = 0.4
LEVERAGE_WEIGHT = 0.35
NEGLECT_WEIGHT = 0.25
SCHEDULED_TODAY_BONUS = 1.0

SECONDS_PER_DAY = 86400.0


def days_between(earlier: datetime, later: datetime) -> float:
    """Fractional days from earlier to later."""
    return (later - earlier).total_seconds() / SECONDS_PER_DAY


def neglect_score(created_at: datetime, last_seen_at: datetime, now: datetime) -> float:
    """
    Time-decay neglect.

    Unbounded on purpose: a task nobody looks at keeps rising.
    """
    age_days = days_between(created_at, now)
    since_seen_days = days_between(last_seen_at, now)
    return AGE_WEIGHT * age_days + SINCE_SEEN_WEIGHT * since_seen_days


def priority(task: Task, today: date) -> float:
    """
    Weighted priority used to rank focus candidates.

    A task scheduled for today gets a flat bonus that puts it ahead of
    anything whose composite is at most 1.0.
    """
    score = (
        PRESSURE_WEIGHT * task.pressure_score
        + LEVERAGE_WEIGHT * task.leverage_score
        + NEGLECT_WEIGHT * task.neglect_score
    )
    if task.is_scheduled_for(today):
        score += SCHEDULED_TODAY_BONUS
    return score


def clamp_unit(value: float) -> float:
    """Clamp an extractor score into [0, 1]."""
    return max(0.0, min(1.0, float(value)))
