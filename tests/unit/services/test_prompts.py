"""Tests for classifier prompt builders."""

from datetime import UTC, datetime

from feedback_intel.models.feedback import FeedbackWithClassification
from feedback_intel.services.classifier import FeedbackItem, FeedbackMetrics
from feedback_intel.services.classifier.prompts import (
    bucket_by_route,
    build_classification_prompt,
    build_summary_prompt,
    build_themes_prompt,
)


def _item(**overrides) -> FeedbackItem:
    fields = {
        "id": "gh-002",
        "source": "github",
        "title": "After fallback to http2 cloudflared never attempts quic again",
        "content": "QUIC was never tried again; cloudflared sat there retrying http2 forever.",
        "label": "bug",
    }
    fields.update(overrides)
    return FeedbackItem(**fields)


def _classified(title: str, route: str, **overrides) -> FeedbackWithClassification:
    fields = {
        "id": title,
        "source": "github",
        "title": title,
        "content": "content",
        "created_at": datetime(2026, 1, 1, tzinfo=UTC),
        "urgency": 4,
        "sentiment": -1,
        "impact": 5,
        "actionability": 4,
        "route": route,
    }
    fields.update(overrides)
    return FeedbackWithClassification(**fields)


class TestBuildClassificationPrompt:
    def test_includes_feedback_fields(self, default_rules):
        prompt = build_classification_prompt(_item(), default_rules)

        assert "- **Source**: github" in prompt
        assert "- **Title**: After fallback to http2" in prompt
        assert "- **Label**: bug" in prompt
        assert "retrying http2 forever" in prompt

    def test_missing_label_rendered_as_none(self, default_rules):
        prompt = build_classification_prompt(_item(label=None), default_rules)
        assert "- **Label**: None" in prompt

    def test_keyword_hints_rendered_comma_joined(self, default_rules):
        prompt = build_classification_prompt(_item(), default_rules)

        critical = ", ".join(default_rules.urgency_keywords.critical)
        enterprise = ", ".join(default_rules.impact_signals.enterprise)
        assert f"**Critical keywords**: {critical}" in prompt
        assert f"**Enterprise signals**: {enterprise}" in prompt

    def test_includes_rubrics_and_response_format(self, default_rules):
        prompt = build_classification_prompt(_item(), default_rules)

        for heading in (
            "### Urgency (1-5)",
            "### Sentiment (-2 to +2)",
            "### Impact (1-5)",
            "### Actionability (1-5)",
            "## Response Format",
        ):
            assert heading in prompt
        assert "Calm tone does NOT reduce urgency" in prompt

    def test_deterministic(self, default_rules):
        item = _item()
        assert build_classification_prompt(item, default_rules) == build_classification_prompt(
            item, default_rules
        )


class TestBucketByRoute:
    def test_matches_substring_of_multi_route(self):
        items = [
            _classified("a", "immediate_engineering,trust_risk"),
            _classified("b", "trust_risk"),
            _classified("c", "standard_backlog"),
        ]
        assert [f.title for f in bucket_by_route(items, "trust_risk")] == ["a", "b"]

    def test_caps_bucket_size(self):
        items = [_classified(f"item-{i}", "quick_win_backlog") for i in range(8)]
        assert len(bucket_by_route(items, "quick_win_backlog")) == 5

    def test_skips_unclassified(self):
        items = [_classified("a", None)]  # type: ignore[arg-type]
        assert bucket_by_route(items, "trust_risk") == []


class TestBuildSummaryPrompt:
    def test_metrics_and_buckets(self):
        metrics = FeedbackMetrics(
            total=12,
            by_route=[{"route": "trust_risk", "count": 3}],
            by_source=[{"source": "github", "count": 12}],
            averages={
                "avg_urgency": 3.456,
                "avg_sentiment": -0.25,
                "avg_impact": None,
                "avg_actionability": 3.0,
            },
        )
        items = [
            _classified("Tunnel outage", "immediate_engineering,trust_risk"),
            _classified("Publish to ghcr", "quick_win_backlog", actionability=5),
        ]

        prompt = build_summary_prompt(items, metrics, "Last 7 days")

        assert "## Period: Last 7 days" in prompt
        assert "- Total feedback items: 12" in prompt
        assert '- By route: [{"route": "trust_risk", "count": 3}]' in prompt
        assert "Urgency 3.5, Sentiment -0.2, Impact N/A" in prompt
        assert "- [github] Tunnel outage (Urgency:4 Impact:5)" in prompt
        assert "- [github] Tunnel outage (Sentiment:-1 Impact:5)" in prompt
        assert "- [github] Publish to ghcr (Actionability:5)" in prompt

    def test_empty_buckets_render_none(self):
        prompt = build_summary_prompt([], FeedbackMetrics(), "Last 1 days")

        assert "## High Priority Items (Immediate Engineering)\nNone" in prompt
        assert "## Quick Wins (Low urgency, high actionability)\nNone" in prompt


class TestBuildThemesPrompt:
    def test_truncates_content_and_item_count(self):
        items = [_item(id=f"gh-{i}", title=f"T{i}", content="x" * 500) for i in range(25)]

        prompt = build_themes_prompt(items, 3)

        assert "extract the 3 most common themes" in prompt
        assert f"- T0: {'x' * 200}\n" in prompt
        assert "x" * 201 not in prompt
        assert "- T19:" in prompt
        assert "- T20:" not in prompt
