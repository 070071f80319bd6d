"""Tests for dump capture and processing."""

from unittest.mock import MagicMock

import pytest
import requests

from clear.adapters.extractors import LineExtractor, LLMTaskExtractor
from clear.adapters.gemini_api import GeminiService
from clear.core.tasks import TaskCandidate
from clear.errors import ExtractionError, ValidationError
from clear.intake import extract_candidates, process_dumps, submit_dump


@pytest.fixture
def extractor():
    mock = MagicMock()
    mock.extract.return_value = [TaskCandidate(text="Buy milk", pressure=0.2, leverage=0.1)]
    return mock


class TestSubmitDump:
    def test_stores_unprocessed(self, store, user_id):
        entry = submit_dump(store, user_id, "  buy milk  ")

        assert entry.content == "buy milk"
        assert [d.id for d in store.list_unprocessed(user_id)] == [entry.id]

    @pytest.mark.parametrize("content", ["", "   ", None])
    def test_rejects_empty(self, store, user_id, content):
        with pytest.raises(ValidationError, match="Content is required"):
            submit_dump(store, user_id, content)
        assert store.list_dumps(user_id) == []


class TestExtractCandidates:
    def test_returns_extractor_output(self, today):
        candidates = extract_candidates(LineExtractor(), "milk\neggs", today)
        assert [c.text for c in candidates] == ["milk", "eggs"]

    def test_passes_today(self, extractor, today):
        extract_candidates(extractor, "text", today)
        extractor.extract.assert_called_once_with("text", today)

    def test_fallback_on_extraction_error(self, today):
        failing = MagicMock()
        failing.extract.side_effect = ExtractionError("bad json")

        candidates = extract_candidates(failing, "x" * 300, today)

        assert len(candidates) == 1
        assert candidates[0].text == "x" * 200
        assert candidates[0].pressure == 0.5
        assert candidates[0].leverage == 0.5

    def test_empty_extraction(self, extractor, today):
        extractor.extract.return_value = []
        assert extract_candidates(extractor, "just journaling", today) == []


class TestProcessDumps:
    def test_processes_and_marks(self, store, user_id, extractor, today, now):
        store.add_dump(user_id, "need milk")

        report = process_dumps(store, extractor, user_id, today, now)

        assert report.succeeded == 1
        assert report.failed == 0
        assert store.list_unprocessed(user_id) == []
        assert [t.canonical_text for t in store.list_tasks(user_id)] == ["Buy milk"]

    def test_nothing_pending(self, store, user_id, extractor, today, now):
        report = process_dumps(store, extractor, user_id, today, now)

        assert report.total == 0
        extractor.extract.assert_not_called()

    def test_failed_dump_stays_pending_others_continue(self, store, user_id, extractor, today, now):
        bad = store.add_dump(user_id, "bad")
        store.add_dump(user_id, "good")
        extractor.extract.side_effect = [
            [TaskCandidate(text=None, pressure=0.5, leverage=0.5)],
            [TaskCandidate(text="Good task", pressure=0.5, leverage=0.5)],
        ]

        report = process_dumps(store, extractor, user_id, today, now)

        assert report.succeeded == 1
        assert report.failed == 1
        assert [d.id for d in store.list_unprocessed(user_id)] == [bad.id]
        assert [t.canonical_text for t in store.list_tasks(user_id)] == ["Good task"]

    def test_partial_write_is_rolled_back_and_not_duplicated(self, store, user_id, extractor, today, now):
        store.add_dump(user_id, "two things")
        first = TaskCandidate(text="First", pressure=0.5, leverage=0.5)
        extractor.extract.side_effect = [
            [first, TaskCandidate(text=None, pressure=0.5, leverage=0.5)],
            [first],
        ]

        failed = process_dumps(store, extractor, user_id, today, now)
        assert failed.failed == 1
        assert store.list_tasks(user_id) == []

        retried = process_dumps(store, extractor, user_id, today, now)

        assert retried.succeeded == 1
        assert [t.canonical_text for t in store.list_tasks(user_id)] == ["First"]
        assert store.list_unprocessed(user_id) == []

    def test_extraction_error_creates_fallback_task(self, store, user_id, today, now):
        store.add_dump(user_id, "rambling")
        failing = MagicMock()
        failing.extract.side_effect = ExtractionError("timeout")

        report = process_dumps(store, failing, user_id, today, now)

        assert report.succeeded == 1
        assert store.list_unprocessed(user_id) == []
        assert store.list_tasks(user_id)[0].canonical_text == "rambling"

    def test_non_json_gemini_body_creates_fallback_task(self, store, user_id, today, now):
        store.add_dump(user_id, "call the bank about the card")
        service = GeminiService("secret")
        response = MagicMock()
        response.json.side_effect = requests.exceptions.JSONDecodeError("Expecting value", "<html>", 0)
        service._session = MagicMock()
        service._session.post.return_value = response

        report = process_dumps(store, LLMTaskExtractor(service), user_id, today, now)

        assert report.succeeded == 1
        assert report.failed == 0
        assert store.list_unprocessed(user_id) == []
        tasks = store.list_tasks(user_id)
        assert [t.canonical_text for t in tasks] == ["call the bank about the card"]
        assert tasks[0].pressure_score == 0.5

    def test_only_this_users_dumps(self, store, user_id, other_user_id, extractor, today, now):
        store.add_dump(other_user_id, "theirs")

        process_dumps(store, extractor, user_id, today, now)

        assert len(store.list_unprocessed(other_user_id)) == 1
