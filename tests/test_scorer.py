"""Tests for the neglect scoring pass."""

from datetime import timedelta
from unittest.mock import MagicMock

import pytest

from clear.core.tasks import ActivityType, TaskStatus, activity_effect
from clear.scorer import score_tasks


class TestScoreTasks:
    def test_failed_update_does_not_stop_the_rest(self, make_task, now):
        repo = MagicMock()
        repo.list_tasks.return_value = [make_task("a"), make_task("b"), make_task("c")]
        repo.update_neglect.side_effect = [None, Exception("boom"), None]

        report = score_tasks(repo, "u1", now)

        assert report.succeeded == 2
        assert report.failed == 1
        assert [c.args[0] for c in repo.update_neglect.call_args_list] == ["a", "b", "c"]

    def test_asks_only_for_open_tasks(self, now):
        repo = MagicMock()
        repo.list_tasks.return_value = []

        assert score_tasks(repo, "u1", now).total == 0
        repo.list_tasks.assert_called_once_with("u1", [TaskStatus.OPEN])

    def test_writes_neglect_from_timestamps(self, store, user_id, add_task, now):
        task = add_task(user_id, "Old", created_at=now - timedelta(days=10))

        score_tasks(store, user_id, now)

        # 0.1 * 10 days old + 0.05 * 10 days unseen
        assert store.get_task(user_id, task.id).neglect_score == pytest.approx(1.5)

    def test_skips_done_and_archived(self, store, user_id, add_task, today, now):
        earlier = now - timedelta(days=4)
        done = add_task(user_id, "Done", created_at=earlier)
        archived = add_task(user_id, "Archived", created_at=earlier)
        store.apply_activity(user_id, done.id, activity_effect(ActivityType.DONE), today, earlier)
        store.archive(user_id, archived.id)

        report = score_tasks(store, user_id, now)

        assert report.total == 0
        assert store.get_task(user_id, done.id).neglect_score == 0.0
        assert store.get_task(user_id, archived.id).neglect_score == 0.0

    def test_leaves_pressure_and_leverage_alone(self, store, user_id, add_task, now):
        task = add_task(user_id, "Task", pressure=0.3, leverage=0.8, created_at=now - timedelta(days=2))

        score_tasks(store, user_id, now + timedelta(days=1))

        stored = store.get_task(user_id, task.id)
        assert stored.pressure_score == 0.3
        assert stored.leverage_score == 0.8
        assert stored.neglect_score > 0

    def test_only_this_users_tasks(self, store, user_id, other_user_id, add_task, now):
        theirs = add_task(other_user_id, "Theirs", created_at=now - timedelta(days=3))

        score_tasks(store, user_id, now)

        assert store.get_task(other_user_id, theirs.id).neglect_score == 0.0
