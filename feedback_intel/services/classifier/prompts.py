"""
Classifier prompt builders.

Functions for building the prompts sent to the LLM for classification,
PM summaries and theme extraction. All builders are deterministic.
"""

import json
from collections.abc import Sequence

from feedback_intel.models.feedback import FeedbackWithClassification
from feedback_intel.services.classifier.constants import (
    ROUTE_IMMEDIATE_ENGINEERING,
    ROUTE_QUICK_WIN_BACKLOG,
    ROUTE_TRUST_RISK,
    SUMMARY_ITEMS_PER_BUCKET,
    THEME_MAX_ITEMS,
    THEME_SNIPPET_CHARS,
)
from feedback_intel.services.classifier.types import (
    FeedbackItem,
    FeedbackMetrics,
    RuleConfiguration,
)

URGENCY_RUBRIC = """### Urgency (1-5)
- 1: Low - General questions, nice-to-haves
- 2: Moderate - Minor friction, workarounds exist
- 3: High - Functionality degraded, needs attention
- 4: Severe - Production affected, no workaround (even if reported calmly)
- 5: Critical - Security risk, installation blocked, complete outage"""

URGENCY_GUIDANCE = (
    "IMPORTANT: Security concerns should be minimum Urgency 3. Installation failures "
    "should be minimum Urgency 4. Calm tone does NOT reduce urgency - score based on "
    "technical severity."
)

SENTIMENT_RUBRIC = """### Sentiment (-2 to +2)
- -2: Frustrated (explicit frustration, strong negative language, ALL CAPS, "ridiculous", "unacceptable")
- -1: Dissatisfied (pain points, mild complaints, "a pain", "frustrating")
- 0: Neutral (factual reporting, no emotional indicators)
- +1: Appreciative (thanks, acknowledges good work, "great product")
- +2: Enthusiastic (strong praise, advocacy)"""

IMPACT_RUBRIC = """### Impact (1-5)
- 1: Minimal - Single user curiosity
- 2: Low - Individual inconvenience, easy workaround
- 3: Moderate - Team/environment affected, painful workaround
- 4: High - Production degraded, enterprise environment, blocks adoption
- 5: Severe - Complete breakage, affects all users, security/data risk"""

ACTIONABILITY_RUBRIC = """### Actionability (1-5)
- 1: Unclear - Vague, missing context
- 2: Needs Info - Some detail but requires follow-up
- 3: Partially Actionable - Clear problem, uncertain solution
- 4: Actionable - Clear problem + environment + steps
- 5: Immediately Actionable - Clear bug with repro steps, obvious fix path"""

RESPONSE_FORMAT = """## Response Format
Return ONLY valid JSON (no markdown, no explanation):
{
  "classification": {
    "urgency": <1-5>,
    "sentiment": <-2 to 2>,
    "impact": <1-5>,
    "actionability": <1-5>
  },
  "signals": [
    {"signal_type": "feature_area", "signal_value": "<area like tunnels, installation, authentication>", "confidence": <0-1>},
    {"signal_type": "user_segment", "signal_value": "<segment like enterprise, hobbyist, developer>", "confidence": <0-1>},
    {"signal_type": "issue_category", "signal_value": "<category like bug, feature_request, question, documentation>", "confidence": <0-1>}
  ],
  "confidence": <0-1>,
  "reasoning": "<1-2 sentence explanation of scores>"
}"""


def _join(words: Sequence[str]) -> str:
    return ", ".join(words)


def build_classification_prompt(feedback: FeedbackItem, rules: RuleConfiguration) -> str:
    """
    Build the prompt for classifying a single feedback item.

    Keyword lists from the rules are rendered as hints only; routing is
    decided afterwards by the rule engine, never by keyword matching.

    Args:
        feedback: The item to classify
        rules: Rule configuration supplying keyword hints

    Returns:
        Formatted prompt string
    """
    urgency = rules.urgency_keywords
    impact = rules.impact_signals

    sections = [
        "Analyze this feedback and classify it according to our framework.",
        "",
        "## Feedback",
        f"- **Source**: {feedback.source}",
        f"- **Title**: {feedback.title}",
        f"- **Label**: {feedback.label or 'None'}",
        f"- **Content**: {feedback.content}",
        "",
        "## Classification Framework",
        "",
        URGENCY_RUBRIC,
        "",
        f"**Critical keywords**: {_join(urgency.critical)}",
        f"**High keywords**: {_join(urgency.high)}",
        f"**Low keywords**: {_join(urgency.low)}",
        "",
        URGENCY_GUIDANCE,
        "",
        SENTIMENT_RUBRIC,
        "",
        IMPACT_RUBRIC,
        "",
        f"**Enterprise signals**: {_join(impact.enterprise)}",
        f"**Production signals**: {_join(impact.production)}",
        f"**Single user signals**: {_join(impact.single_user)}",
        "",
        ACTIONABILITY_RUBRIC,
        "",
        RESPONSE_FORMAT,
    ]

    return "\n".join(sections)


def bucket_by_route(
    feedback_items: Sequence[FeedbackWithClassification],
    route_label: str,
    limit: int = SUMMARY_ITEMS_PER_BUCKET,
) -> list[FeedbackWithClassification]:
    """Return up to ``limit`` items whose route string contains ``route_label``."""
    return [f for f in feedback_items if f.route and route_label in f.route][:limit]


def _format_average(value: float | None) -> str:
    return f"{value:.1f}" if value is not None else "N/A"


def _format_bucket(lines: list[str]) -> str:
    return "\n".join(lines) if lines else "None"


def build_summary_prompt(
    feedback_items: Sequence[FeedbackWithClassification],
    metrics: FeedbackMetrics,
    period_label: str,
) -> str:
    """
    Build the prompt for a PM summary over a reporting period.

    Args:
        feedback_items: Classified feedback for the period
        metrics: Aggregate metrics for the period
        period_label: Human-readable period, e.g. "Last 7 days"

    Returns:
        Formatted prompt string
    """
    immediate = bucket_by_route(feedback_items, ROUTE_IMMEDIATE_ENGINEERING)
    trust_risks = bucket_by_route(feedback_items, ROUTE_TRUST_RISK)
    quick_wins = bucket_by_route(feedback_items, ROUTE_QUICK_WIN_BACKLOG)
    averages = metrics.averages

    sections = [
        "You are a senior product analyst. Generate a concise, actionable PM summary.",
        "",
        f"## Period: {period_label}",
        "",
        "## Metrics",
        f"- Total feedback items: {metrics.total}",
        f"- By route: {json.dumps(metrics.by_route)}",
        f"- By source: {json.dumps(metrics.by_source)}",
        (
            f"- Averages: Urgency {_format_average(averages.get('avg_urgency'))}, "
            f"Sentiment {_format_average(averages.get('avg_sentiment'))}, "
            f"Impact {_format_average(averages.get('avg_impact'))}"
        ),
        "",
        "## High Priority Items (Immediate Engineering)",
        _format_bucket(
            [f"- [{f.source}] {f.title} (Urgency:{f.urgency} Impact:{f.impact})" for f in immediate]
        ),
        "",
        "## Trust Risks (Frustrated users with significant impact)",
        _format_bucket(
            [
                f"- [{f.source}] {f.title} (Sentiment:{f.sentiment} Impact:{f.impact})"
                for f in trust_risks
            ]
        ),
        "",
        "## Quick Wins (Low urgency, high actionability)",
        _format_bucket(
            [f"- [{f.source}] {f.title} (Actionability:{f.actionability})" for f in quick_wins]
        ),
        "",
        "Generate a summary with these sections:",
        "1. **Executive Summary** (2-3 sentences)",
        "2. **Key Themes** (2-3 bullet points)",
        "3. **Recommended Actions** (prioritized numbered list)",
        "4. **Risk Assessment** (any trust or reliability concerns)",
        "",
        "Keep it concise and actionable. Focus on insights, not just data repetition.",
    ]

    return "\n".join(sections)


def build_themes_prompt(feedback_items: Sequence[FeedbackItem], limit: int) -> str:
    """
    Build the prompt for extracting common themes.

    Only the first THEME_MAX_ITEMS items are included, each reduced to its
    title and a short content snippet.
    """
    feedback_summary = "\n".join(
        f"- {f.title}: {f.content[:THEME_SNIPPET_CHARS]}"
        for f in feedback_items[:THEME_MAX_ITEMS]
    )

    return f"""Analyze these feedback items and extract the {limit} most common themes or topics.

Feedback:
{feedback_summary}

Return ONLY a JSON array of theme strings, e.g.: ["theme1", "theme2", "theme3"]"""
