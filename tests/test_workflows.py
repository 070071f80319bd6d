"""Tests for the shared workflow layer."""

from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, call, patch

import pytest

from clear.adapters.claude_cli import ClaudeCLIService
from clear.adapters.extractors import LineExtractor, LLMTaskExtractor
from clear.adapters.gemini_api import GeminiService
from clear.config import Config
from clear.core.settings import DAILY_FOCUS_COUNT
from clear.core.tasks import ActivityType, TaskCandidate, TaskStatus, activity_effect
from clear.workflows import (
    focus_payload,
    get_extractor,
    get_store,
    get_today_focus,
    refocus,
    run_daily_cycle,
    run_for_all_users,
    today_for,
)


class TestGetStore:
    def test_opens_configured_path(self, tmp_path):
        store = get_store(Config(database_path=tmp_path / "db" / "clear.sqlite3"))
        assert store.db_path == tmp_path / "db" / "clear.sqlite3"


class TestGetExtractor:
    def test_defaults_to_claude(self):
        extractor = get_extractor(Config())
        assert isinstance(extractor, LLMTaskExtractor)
        assert isinstance(extractor.llm, ClaudeCLIService)

    def test_claude_timeout(self):
        extractor = get_extractor(Config(claude_timeout=30))
        assert extractor.llm.timeout == 30

    def test_gemini(self):
        extractor = get_extractor(Config(extractor="gemini", gemini_api_key="k", gemini_model="m"))
        assert isinstance(extractor.llm, GeminiService)
        assert extractor.llm.model == "m"

    def test_gemini_requires_key(self):
        with pytest.raises(ValueError, match="GEMINI_API_KEY"):
            get_extractor(Config(extractor="gemini"))

    def test_lines(self):
        assert isinstance(get_extractor(Config(extractor="lines")), LineExtractor)


class TestTodayFor:
    def test_uses_configured_timezone(self):
        late_utc = datetime(2025, 1, 15, 23, 30, tzinfo=timezone.utc)
        assert today_for(Config(timezone="UTC"), late_utc).isoformat() == "2025-01-15"
        assert today_for(Config(timezone="Asia/Tokyo"), late_utc).isoformat() == "2025-01-16"
        assert today_for(Config(timezone="America/New_York"), late_utc).isoformat() == "2025-01-15"


class TestRefocus:
    @patch("clear.workflows.generate_daily_focus")
    @patch("clear.workflows.score_tasks")
    @patch("clear.workflows.process_dumps")
    def test_runs_intake_then_scoring_then_forced_selection(
        self, mock_process, mock_score, mock_generate, today, now
    ):
        store, extractor = MagicMock(), MagicMock()
        order = MagicMock()
        order.attach_mock(mock_process, "process")
        order.attach_mock(mock_score, "score")
        order.attach_mock(mock_generate, "generate")

        refocus(store, extractor, "u1", today, now)

        assert order.mock_calls == [
            call.process(store, extractor, "u1", today, now),
            call.score(store, "u1", now),
            call.generate(store, "u1", today, now, force=True),
        ]

    def test_new_dump_can_win_a_slot(self, store, user_id, add_task, today, now):
        add_task(user_id, "Old", pressure=0.1, leverage=0.1)
        store.set_setting(user_id, DAILY_FOCUS_COUNT, "1")
        get_today_focus(store, user_id, today, now)
        store.add_dump(user_id, "File taxes")
        extractor = MagicMock()
        extractor.extract.return_value = [TaskCandidate(text="File taxes", pressure=1.0, leverage=1.0)]

        focus = refocus(store, extractor, user_id, today, now)

        top = store.get_task(user_id, focus.top_task_ids[0])
        assert top.canonical_text == "File taxes"


class TestGetTodayFocus:
    def test_generates_lazily(self, store, user_id, add_task, today, now):
        task = add_task(user_id, "Only")

        resolved = get_today_focus(store, user_id, today, now)

        assert resolved.top_tasks[0].id == task.id
        assert store.get_focus(user_id, today) is not None

    def test_reuses_existing(self, store, user_id, add_task, today, now):
        first = add_task(user_id, "First")
        get_today_focus(store, user_id, today, now)
        add_task(user_id, "Urgent", pressure=1.0, leverage=1.0)

        resolved = get_today_focus(store, user_id, today, now)

        assert resolved.top_tasks[0].id == first.id

    def test_none_without_tasks(self, store, user_id, today, now):
        assert get_today_focus(store, user_id, today, now) is None

    def test_archived_slot_reads_empty(self, store, user_id, add_task, today, now):
        task = add_task(user_id, "Doomed")
        get_today_focus(store, user_id, today, now)
        store.archive(user_id, task.id)

        resolved = get_today_focus(store, user_id, today, now)

        assert resolved.top_tasks[0] is None
        assert store.get_focus(user_id, today).top_task_ids[0] == task.id

    def test_done_slot_still_shown(self, store, user_id, add_task, today, now):
        task = add_task(user_id, "Finished")
        get_today_focus(store, user_id, today, now)
        store.apply_activity(user_id, task.id, activity_effect(ActivityType.DONE), today, now)

        resolved = get_today_focus(store, user_id, today, now)

        assert resolved.top_tasks[0].status is TaskStatus.DONE


class TestFocusPayload:
    def test_no_focus(self):
        assert focus_payload(None) == {"focus": None}

    def test_shape(self, store, user_id, add_task, today, now):
        add_task(user_id, "Only")
        payload = focus_payload(get_today_focus(store, user_id, today, now))

        assert payload["topTask1"]["canonicalText"] == "Only"
        assert payload["topTask2"] is None
        assert payload["avoidedTask"] is None


class TestRunDailyCycle:
    def test_does_not_replace_existing_focus(self, store, user_id, add_task, today, now):
        first = add_task(user_id, "First")
        get_today_focus(store, user_id, today, now)
        add_task(user_id, "Urgent", pressure=1.0, leverage=1.0)

        assert run_daily_cycle(store, LineExtractor(), user_id, today, now) is None
        assert store.get_focus(user_id, today).top_task_ids[0] == first.id

    def test_scores_before_selecting(self, store, user_id, add_task, today, now):
        old = add_task(user_id, "Stale", created_at=now - timedelta(days=30))
        add_task(user_id, "Fresh")
        store.set_setting(user_id, DAILY_FOCUS_COUNT, "1")

        focus = run_daily_cycle(store, LineExtractor(), user_id, today, now)

        assert focus.top_task_ids[0] == old.id


class TestRunForAllUsers:
    def test_isolates_failures(self, store):
        ids = [store.add_user(f"{n}@example.com") for n in ("a", "b", "c")]
        seen = []

        def job(user_id):
            seen.append(user_id)
            if user_id == ids[1]:
                raise RuntimeError("boom")

        report = run_for_all_users(store, job, "test job")

        assert seen == ids
        assert report.succeeded == 2
        assert report.failed == 1

    def test_no_users(self, store):
        assert run_for_all_users(store, MagicMock(), "test job").total == 0
