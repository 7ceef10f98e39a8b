"""Batch classification of pending feedback.

Classifies items one at a time (the LLM endpoint is consumed serially),
persists and commits each classification with its signals as soon as it
is produced, and caches the result for short-window deduplication.
"""

import logging
from dataclasses import dataclass, field
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.domain.classification_operations import classification_ops, signal_ops
from feedback_intel.domain.feedback_operations import feedback_ops
from feedback_intel.models.feedback import Feedback, FeedbackWithClassification
from feedback_intel.services.classifier import (
    ClassificationOutcome,
    FeedbackClassifier,
    FeedbackItem,
    RuleConfiguration,
)
from feedback_intel.services.config_store import config_store

logger = logging.getLogger(__name__)


def to_feedback_item(feedback: Feedback | FeedbackWithClassification) -> FeedbackItem:
    """Adapt a stored feedback row (plain or joined) to the classifier's input type."""
    return FeedbackItem(
        id=feedback.id,
        source=feedback.source,
        title=feedback.title,
        content=feedback.content,
        label=feedback.label,
        author=feedback.author,
        created_at=feedback.created_at,
    )


@dataclass
class BatchReport:
    """Outcome of one batch run."""

    classified: list[dict[str, Any]] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)  # feedback ids
    fallbacks: int = 0

    @property
    def classified_count(self) -> int:
        return sum(1 for item in self.classified if not item.get("cached"))


class ClassificationRunner:
    """Classify, persist and cache feedback items."""

    def __init__(self, classifier: FeedbackClassifier | None = None) -> None:
        self.classifier = classifier or FeedbackClassifier()

    async def classify_and_store(
        self,
        db: AsyncSession,
        feedback: Feedback,
        rules: RuleConfiguration,
    ) -> ClassificationOutcome:
        """Classify one item and persist the classification, signals and cache entry."""
        outcome = await self.classifier.classify(to_feedback_item(feedback), rules)

        await classification_ops.store(db, outcome.classification)
        if outcome.signals:
            await signal_ops.replace_for_feedback(db, outcome.signals)
        await config_store.cache_classification(
            db, feedback.id, outcome.classification.to_dict()
        )

        return outcome

    async def classify_pending(
        self,
        db: AsyncSession,
        limit: int,
        *,
        skip_failures: bool = False,
    ) -> BatchReport:
        """
        Classify up to ``limit`` unclassified items.

        Args:
            db: Database session
            limit: Maximum number of items to take from the pending queue
            skip_failures: If True, log and skip items whose LLM call fails;
                otherwise the first failure propagates. Items
                completed before a failure stay committed either way

        Returns:
            BatchReport listing classified (or cache-hit) items and failures
        """
        rules = await config_store.get_classification_rules(db)
        pending = await feedback_ops.get_unclassified(db, limit=limit)
        report = BatchReport()

        for feedback in pending:
            cached = await config_store.get_cached_classification(db, feedback.id)
            if cached:
                report.classified.append({"id": feedback.id, "cached": True, **cached})
                continue

            try:
                outcome = await self.classify_and_store(db, feedback, rules)
                # Persist each item as it completes; a later failure must not undo it
                await db.commit()
            except Exception as e:
                await db.rollback()
                if not skip_failures:
                    raise
                logger.error(f"Failed to classify {feedback.id}: {e}")
                report.failed.append(feedback.id)
                continue

            if outcome.used_fallback:
                report.fallbacks += 1
            report.classified.append(
                {"id": feedback.id, "cached": False, **outcome.classification.to_dict()}
            )

        logger.info(
            f"Classified {report.classified_count} feedback items "
            f"({report.fallbacks} fallbacks, {len(report.failed)} failed)"
        )
        return report

    async def reclassify(
        self,
        db: AsyncSession,
        feedback: Feedback,
    ) -> ClassificationOutcome:
        """Drop the cached result and classify again, superseding the stored one."""
        await config_store.clear_classification_cache(db, feedback.id)
        rules = await config_store.get_classification_rules(db)
        return await self.classify_and_store(db, feedback, rules)
