"""
Feedback classifier for structured scoring, routing and PM summaries.

This service asks an LLM to score feedback along four axes (urgency,
sentiment, impact, actionability) and extract signals, then routes the
item with the rule engine. Malformed model output degrades to a fixed
conservative classification; transport errors are left to the caller.
"""

import logging
from collections.abc import Sequence

from feedback_intel.config import settings
from feedback_intel.models.feedback import FeedbackWithClassification
from feedback_intel.services.classifier.constants import (
    CLASSIFICATION_SYSTEM_PROMPT,
    DEFAULT_THEME_LIMIT,
    SUMMARY_SYSTEM_PROMPT,
    THEME_SYSTEM_PROMPT,
)
from feedback_intel.services.classifier.fallback import resolve_parse_outcome
from feedback_intel.services.classifier.llm import (
    AnthropicChatCompletion,
    ChatCompletion,
    ChatMessage,
)
from feedback_intel.services.classifier.parser import (
    parse_classification_response,
    parse_themes_response,
)
from feedback_intel.services.classifier.prompts import (
    build_classification_prompt,
    build_summary_prompt,
    build_themes_prompt,
)
from feedback_intel.services.classifier.rules import route
from feedback_intel.services.classifier.types import (
    ClassificationOutcome,
    ClassificationResult,
    FeedbackItem,
    FeedbackMetrics,
    RuleConfiguration,
    Signal,
)

logger = logging.getLogger(__name__)


def _messages(system_prompt: str, user_prompt: str) -> list[ChatMessage]:
    return [
        {"role": "system", "content": system_prompt},
        {"role": "user", "content": user_prompt},
    ]


class FeedbackClassifier:
    """
    Classify feedback and summarize classified feedback for PMs.

    Holds no state beyond its LLM capability and model names, so one
    instance can serve any number of sequential or concurrent calls.
    """

    def __init__(
        self,
        llm: ChatCompletion | None = None,
        classification_model: str | None = None,
        theme_model: str | None = None,
    ) -> None:
        self.llm: ChatCompletion = llm or AnthropicChatCompletion()
        self.classification_model = classification_model or settings.classification_model
        self.theme_model = theme_model or settings.theme_model

    async def classify(
        self,
        feedback: FeedbackItem,
        rules: RuleConfiguration,
    ) -> ClassificationOutcome:
        """
        Classify one feedback item and route it.

        Args:
            feedback: The item to classify
            rules: Complete rule configuration (thresholds + keyword hints)

        Returns:
            ClassificationOutcome with the classification, its signals, and
            whether the conservative fallback was used

        Raises:
            Whatever the LLM capability raises (timeouts, API errors).
            Parse failures never raise.
        """
        prompt = build_classification_prompt(feedback, rules)
        response_text = await self.llm.run(
            self.classification_model,
            _messages(CLASSIFICATION_SYSTEM_PROMPT, prompt),
        )

        outcome = parse_classification_response(response_text)
        parsed, used_fallback = resolve_parse_outcome(outcome, response_text, feedback.id)

        vector = parsed.vector
        classification = ClassificationResult(
            feedback_id=feedback.id,
            urgency=vector.urgency,
            sentiment=vector.sentiment,
            impact=vector.impact,
            actionability=vector.actionability,
            route=route(vector, rules),
            confidence=parsed.confidence,
            reasoning=parsed.reasoning,
        )
        signals = [
            Signal(
                feedback_id=feedback.id,
                signal_type=s.signal_type,
                signal_value=s.signal_value,
                confidence=s.confidence,
            )
            for s in parsed.signals
        ]

        return ClassificationOutcome(
            classification=classification,
            signals=signals,
            used_fallback=used_fallback,
        )

    async def generate_summary(
        self,
        feedback_items: Sequence[FeedbackWithClassification],
        metrics: FeedbackMetrics,
        period_label: str,
    ) -> str:
        """Generate a free-text PM summary. The response is returned unmodified."""
        prompt = build_summary_prompt(feedback_items, metrics, period_label)
        return await self.llm.run(
            self.classification_model,
            _messages(SUMMARY_SYSTEM_PROMPT, prompt),
        )

    async def extract_themes(
        self,
        feedback_items: Sequence[FeedbackItem],
        limit: int = DEFAULT_THEME_LIMIT,
    ) -> list[str]:
        """
        Extract the most common themes across feedback items.

        Best effort: returns an empty list on malformed output or when the
        LLM call fails.
        """
        if not feedback_items:
            return []

        prompt = build_themes_prompt(feedback_items, limit)
        try:
            response_text = await self.llm.run(
                self.theme_model,
                _messages(THEME_SYSTEM_PROMPT, prompt),
            )
        except Exception as e:
            logger.warning(f"Theme extraction call failed: {e}")
            return []

        return parse_themes_response(response_text)
