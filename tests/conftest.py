"""Shared fixtures."""

from datetime import date, datetime, timezone

import pytest

from clear.adapters.sqlite_store import SqliteStore
from clear.core.tasks import Task, TaskCandidate


@pytest.fixture
def today():
    return date(2025, 1, 15)


@pytest.fixture
def now(today):
    return datetime(2025, 1, 15, 9, 0, tzinfo=timezone.utc)


@pytest.fixture
def store(tmp_path):
    """Real SQLite store in a temporary directory."""
    return SqliteStore(tmp_path / "clear.sqlite3")


@pytest.fixture
def user_id(store):
    return store.add_user("me@example.com")


@pytest.fixture
def other_user_id(store):
    return store.add_user("someone@example.com")


@pytest.fixture
def make_task(now):
    """Build an in-memory Task with sensible defaults."""

    def _make(task_id: str, pressure=0.0, leverage=0.0, neglect=0.0, **kwargs) -> Task:
        return Task(
            id=task_id,
            user_id=kwargs.pop("user_id", "u1"),
            canonical_text=kwargs.pop("canonical_text", f"Task {task_id}"),
            created_at=kwargs.pop("created_at", now),
            last_seen_at=kwargs.pop("last_seen_at", now),
            pressure_score=pressure,
            leverage_score=leverage,
            neglect_score=neglect,
            **kwargs,
        )

    return _make


@pytest.fixture
def add_task(store, now):
    """Store a task for a user and return it."""

    def _add(user_id: str, text: str, pressure=0.5, leverage=0.5, scheduled_date=None, created_at=None) -> Task:
        return store.create_task(
            user_id,
            TaskCandidate(text=text, pressure=pressure, leverage=leverage, scheduled_date=scheduled_date),
            created_at or now,
        )

    return _add
