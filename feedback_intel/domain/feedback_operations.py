"""Domain operations for Feedback model."""

import json
from collections.abc import Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy import desc, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.domain.base_operations import BaseOperations
from feedback_intel.models.classification import Classification, SignalRecord
from feedback_intel.models.feedback import (
    Feedback,
    FeedbackCreate,
    FeedbackWithClassification,
)
from feedback_intel.services.classifier.types import FeedbackMetrics


def _joined(feedback: Feedback, classification: Classification | None) -> FeedbackWithClassification:
    """Flatten a feedback row and its optional classification."""
    return FeedbackWithClassification(
        id=feedback.id,
        source=feedback.source,
        title=feedback.title,
        content=feedback.content,
        label=feedback.label,
        author=feedback.author,
        created_at=feedback.created_at,
        urgency=classification.urgency if classification else None,
        sentiment=classification.sentiment if classification else None,
        impact=classification.impact if classification else None,
        actionability=classification.actionability if classification else None,
        route=classification.route if classification else None,
        reasoning=classification.reasoning if classification else None,
    )


def _as_float(value: Any) -> float | None:
    # AVG() comes back as Decimal on PostgreSQL
    return float(value) if value is not None else None


class FeedbackOperations(BaseOperations[Feedback]):
    """Ingestion and query operations for Feedback model."""

    def __init__(self) -> None:
        super().__init__(Feedback)

    def _to_model(self, data: FeedbackCreate) -> Feedback:
        raw_metadata = data.raw_metadata
        if raw_metadata is not None and not isinstance(raw_metadata, str):
            raw_metadata = json.dumps(raw_metadata)
        return Feedback(
            **data.model_dump(exclude={"raw_metadata"}),
            raw_metadata=raw_metadata,
        )

    async def ingest(self, db: AsyncSession, data: FeedbackCreate) -> Feedback:
        """Insert a feedback item, replacing any existing item with the same id."""
        feedback = await db.merge(self._to_model(data))
        await db.flush()
        return feedback

    async def ingest_batch(self, db: AsyncSession, items: Sequence[FeedbackCreate]) -> int:
        """Insert-or-replace many feedback items. Returns the number ingested."""
        for data in items:
            await db.merge(self._to_model(data))
        await db.flush()
        return len(items)

    async def get_unclassified(self, db: AsyncSession, limit: int = 50) -> list[Feedback]:
        """Get feedback with no classification yet, newest first."""
        statement = (
            select(Feedback)
            .outerjoin(Classification, Classification.feedback_id == Feedback.id)
            .where(Classification.feedback_id.is_(None))  # type: ignore[union-attr]
            .order_by(desc(Feedback.created_at))
            .limit(limit)
        )
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def list_with_classifications(
        self,
        db: AsyncSession,
        limit: int = 100,
    ) -> list[FeedbackWithClassification]:
        """Get feedback joined with classifications (if any), newest first."""
        statement = (
            select(Feedback, Classification)
            .outerjoin(Classification, Classification.feedback_id == Feedback.id)
            .order_by(desc(Feedback.created_at))
            .limit(limit)
        )
        result = await db.execute(statement)
        return [_joined(feedback, classification) for feedback, classification in result.all()]

    async def get_by_route(
        self,
        db: AsyncSession,
        route: str,
        limit: int = 20,
    ) -> list[FeedbackWithClassification]:
        """Get classified feedback whose route contains ``route``, most urgent first."""
        statement = (
            select(Feedback, Classification)
            .join(Classification, Classification.feedback_id == Feedback.id)
            .where(Classification.route.like(f"%{route}%"))  # type: ignore[union-attr]
            .order_by(desc(Classification.urgency), desc(Classification.impact))
            .limit(limit)
        )
        result = await db.execute(statement)
        return [_joined(feedback, classification) for feedback, classification in result.all()]

    async def get_metrics(
        self,
        db: AsyncSession,
        start: datetime,
        end: datetime,
    ) -> FeedbackMetrics:
        """Aggregate counts and average scores for feedback created in [start, end]."""
        in_period = Feedback.created_at.between(start, end)  # type: ignore[attr-defined]

        total_result = await db.execute(
            select(func.count()).select_from(Feedback).where(in_period)
        )
        total = total_result.scalar() or 0

        by_route_result = await db.execute(
            select(Classification.route, func.count())
            .join(Feedback, Classification.feedback_id == Feedback.id)
            .where(in_period)
            .group_by(Classification.route)
        )
        by_route = [{"route": route, "count": count} for route, count in by_route_result.all()]

        by_source_result = await db.execute(
            select(Feedback.source, func.count()).where(in_period).group_by(Feedback.source)
        )
        by_source = [
            {"source": source, "count": count} for source, count in by_source_result.all()
        ]

        averages_result = await db.execute(
            select(
                func.avg(Classification.urgency),
                func.avg(Classification.sentiment),
                func.avg(Classification.impact),
                func.avg(Classification.actionability),
            )
            .join(Feedback, Classification.feedback_id == Feedback.id)
            .where(in_period)
        )
        avg_urgency, avg_sentiment, avg_impact, avg_actionability = averages_result.one()

        return FeedbackMetrics(
            total=total,
            by_route=by_route,
            by_source=by_source,
            averages={
                "avg_urgency": _as_float(avg_urgency),
                "avg_sentiment": _as_float(avg_sentiment),
                "avg_impact": _as_float(avg_impact),
                "avg_actionability": _as_float(avg_actionability),
            },
        )

    async def get_trending_signals(
        self,
        db: AsyncSession,
        days: int = 7,
        limit: int = 10,
    ) -> list[dict[str, Any]]:
        """Most frequent (signal_type, signal_value) pairs over the last ``days`` days."""
        since = datetime.now(UTC) - timedelta(days=days)
        frequency = func.count().label("frequency")
        statement = (
            select(
                SignalRecord.signal_type,
                SignalRecord.signal_value,
                frequency,
                func.avg(SignalRecord.confidence),
            )
            .join(Feedback, SignalRecord.feedback_id == Feedback.id)
            .where(Feedback.created_at >= since)
            .group_by(SignalRecord.signal_type, SignalRecord.signal_value)
            .order_by(desc(frequency))
            .limit(limit)
        )
        result = await db.execute(statement)
        return [
            {
                "signal_type": signal_type,
                "signal_value": signal_value,
                "frequency": count,
                "avg_confidence": _as_float(avg_confidence),
            }
            for signal_type, signal_value, count, avg_confidence in result.all()
        ]


feedback_ops = FeedbackOperations()
