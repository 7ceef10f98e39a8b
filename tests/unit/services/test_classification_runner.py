"""Tests for ClassificationRunner: persistence and config store mocked."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, patch

import anthropic
import httpx
import pytest

from feedback_intel.models.feedback import FeedbackWithClassification
from feedback_intel.services.classification_runner import ClassificationRunner, to_feedback_item

from tests.helpers.mock_factories import classification_response, make_mock_feedback


@pytest.fixture
def deps(default_rules):
    module = "feedback_intel.services.classification_runner"
    with (
        patch(f"{module}.config_store") as store,
        patch(f"{module}.feedback_ops") as feedback,
        patch(f"{module}.classification_ops") as classifications,
        patch(f"{module}.signal_ops") as signals,
    ):
        store.get_classification_rules = AsyncMock(return_value=default_rules)
        store.get_cached_classification = AsyncMock(return_value=None)
        store.cache_classification = AsyncMock()
        store.clear_classification_cache = AsyncMock()
        feedback.get_unclassified = AsyncMock(return_value=[])
        classifications.store = AsyncMock()
        signals.replace_for_feedback = AsyncMock(return_value=2)
        yield {
            "store": store,
            "feedback": feedback,
            "classifications": classifications,
            "signals": signals,
        }


def _connection_error() -> anthropic.APIConnectionError:
    return anthropic.APIConnectionError(
        request=httpx.Request("POST", "https://api.anthropic.com/v1/messages")
    )


class TestToFeedbackItem:
    def test_copies_fields(self):
        feedback = make_mock_feedback(id="gh-7", label=None)

        item = to_feedback_item(feedback)

        assert item.id == "gh-7"
        assert item.label is None
        assert item.title == feedback.title

    def test_accepts_joined_rows(self):
        row = FeedbackWithClassification(
            id="gh-8",
            source="github",
            title="Docs outdated",
            content="Flags missing",
            created_at=datetime(2026, 1, 1, tzinfo=UTC),
            route="trust_risk",
        )

        item = to_feedback_item(row)

        assert item.id == "gh-8"
        assert item.content == "Flags missing"
        assert item.author is None


class TestClassifyPending:
    def setup_method(self):
        self.db = AsyncMock()

    async def test_nothing_pending(self, classifier, deps):
        report = await ClassificationRunner(classifier).classify_pending(self.db, 10)

        assert report.classified == []
        deps["feedback"].get_unclassified.assert_awaited_once_with(self.db, limit=10)

    async def test_classifies_and_persists(self, classifier, stub_llm, deps):
        deps["feedback"].get_unclassified.return_value = [make_mock_feedback(id="gh-1")]
        stub_llm.queue(classification_response())

        report = await ClassificationRunner(classifier).classify_pending(self.db, 10)

        assert report.classified_count == 1
        entry = report.classified[0]
        assert entry["id"] == "gh-1"
        assert entry["cached"] is False
        assert entry["route"] == "immediate_engineering,trust_risk"

        stored = deps["classifications"].store.call_args[0][1]
        assert stored.feedback_id == "gh-1"
        signals = deps["signals"].replace_for_feedback.call_args[0][1]
        assert {s.feedback_id for s in signals} == {"gh-1"}
        deps["store"].cache_classification.assert_awaited_once()
        assert deps["store"].cache_classification.call_args[0][1] == "gh-1"

    async def test_cache_hit_skips_llm(self, classifier, stub_llm, deps):
        deps["feedback"].get_unclassified.return_value = [make_mock_feedback(id="gh-1")]
        deps["store"].get_cached_classification.return_value = {"urgency": 2, "route": "x"}

        report = await ClassificationRunner(classifier).classify_pending(self.db, 10)

        assert report.classified == [{"id": "gh-1", "cached": True, "urgency": 2, "route": "x"}]
        assert stub_llm.calls == []
        deps["classifications"].store.assert_not_awaited()

    async def test_fallback_has_no_signals_to_store(self, classifier, stub_llm, deps):
        deps["feedback"].get_unclassified.return_value = [make_mock_feedback()]
        stub_llm.queue("garbage")

        report = await ClassificationRunner(classifier).classify_pending(self.db, 10)

        assert report.fallbacks == 1
        deps["classifications"].store.assert_awaited_once()
        deps["signals"].replace_for_feedback.assert_not_awaited()

    async def test_failure_propagates_by_default(self, classifier, stub_llm, deps):
        deps["feedback"].get_unclassified.return_value = [make_mock_feedback()]
        stub_llm.queue(_connection_error())

        with pytest.raises(anthropic.APIConnectionError):
            await ClassificationRunner(classifier).classify_pending(self.db, 10)

    async def test_items_before_a_failure_stay_committed(self, classifier, stub_llm, deps):
        deps["feedback"].get_unclassified.return_value = [
            make_mock_feedback(id="gh-1"),
            make_mock_feedback(id="gh-2"),
        ]
        stub_llm.queue(classification_response(), _connection_error())

        with pytest.raises(anthropic.APIConnectionError):
            await ClassificationRunner(classifier).classify_pending(self.db, 10)

        stored = [c[0][1].feedback_id for c in deps["classifications"].store.call_args_list]
        assert stored == ["gh-1"]
        self.db.commit.assert_awaited_once()
        self.db.rollback.assert_awaited_once()
        deps["store"].cache_classification.assert_awaited_once()

    async def test_skip_failures_continues(self, classifier, stub_llm, deps):
        deps["feedback"].get_unclassified.return_value = [
            make_mock_feedback(id="gh-1"),
            make_mock_feedback(id="gh-2"),
        ]
        stub_llm.queue(_connection_error(), classification_response())

        report = await ClassificationRunner(classifier).classify_pending(
            self.db, 25, skip_failures=True
        )

        assert report.failed == ["gh-1"]
        assert [item["id"] for item in report.classified] == ["gh-2"]
        self.db.commit.assert_awaited_once()

    async def test_items_are_classified_in_order(self, classifier, stub_llm, deps):
        deps["feedback"].get_unclassified.return_value = [
            make_mock_feedback(id=f"gh-{i}", title=f"Title {i}") for i in range(3)
        ]
        stub_llm.default = classification_response()

        await ClassificationRunner(classifier).classify_pending(self.db, 10)

        prompts = [messages[1]["content"] for _, messages in stub_llm.calls]
        assert len(prompts) == 3
        assert all(f"Title {i}" in prompt for i, prompt in enumerate(prompts))


class TestReclassify:
    async def test_clears_cache_then_classifies(self, classifier, stub_llm, deps):
        db = AsyncMock()
        stub_llm.queue(classification_response(urgency=1, impact=1, actionability=5, sentiment=1))

        outcome = await ClassificationRunner(classifier).reclassify(db, make_mock_feedback())

        deps["store"].clear_classification_cache.assert_awaited_once_with(db, "gh-100")
        assert outcome.classification.route == "quick_win_backlog"
        deps["classifications"].store.assert_awaited_once()
