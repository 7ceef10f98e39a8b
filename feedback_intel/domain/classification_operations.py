"""Domain operations for classifications and their signals."""

from collections.abc import Sequence
from datetime import UTC, datetime

from sqlalchemy import delete, select
from sqlalchemy.dialects.postgresql import insert
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.models.classification import Classification, SignalRecord
from feedback_intel.services.classifier.types import ClassificationResult, Signal


class ClassificationOperations:
    """
    Operations for classification results.

    Note: This doesn't extend BaseOperations because classifications are
    keyed by feedback_id and written with upsert semantics.
    """

    def __init__(self) -> None:
        self.model = Classification

    async def get_by_feedback_id(
        self,
        db: AsyncSession,
        feedback_id: str,
    ) -> Classification | None:
        statement = select(Classification).where(Classification.feedback_id == feedback_id)
        result = await db.execute(statement)
        return result.scalar_one_or_none()

    async def store(self, db: AsyncSession, result: ClassificationResult) -> Classification:
        """
        Store a classification, replacing any previous one for the same feedback.

        Uses PostgreSQL's INSERT ... ON CONFLICT DO UPDATE for atomicity.
        """
        values = {
            "urgency": result.urgency,
            "sentiment": result.sentiment,
            "impact": result.impact,
            "actionability": result.actionability,
            "route": result.route,
            "confidence": result.confidence,
            "reasoning": result.reasoning,
            "classified_at": datetime.now(UTC),
        }

        stmt = (
            insert(self.model)
            .values(feedback_id=result.feedback_id, **values)
            .on_conflict_do_update(index_elements=["feedback_id"], set_=values)
            .returning(Classification)
        )

        row = await db.execute(stmt)
        await db.flush()

        return row.scalar_one()


class SignalOperations:
    """Operations for extracted signals."""

    def __init__(self) -> None:
        self.model = SignalRecord

    async def list_for_feedback(self, db: AsyncSession, feedback_id: str) -> list[SignalRecord]:
        statement = select(SignalRecord).where(SignalRecord.feedback_id == feedback_id)
        result = await db.execute(statement)
        return list(result.scalars().all())

    async def replace_for_feedback(self, db: AsyncSession, signals: Sequence[Signal]) -> int:
        """
        Replace all stored signals for every feedback id present in ``signals``.

        Old signals are deleted, never merged. An empty sequence is a no-op,
        so existing signals are kept when a classification yields none.

        Returns:
            Count of inserted rows.
        """
        if not signals:
            return 0

        feedback_ids = list(dict.fromkeys(s.feedback_id for s in signals))
        await db.execute(delete(SignalRecord).where(SignalRecord.feedback_id.in_(feedback_ids)))  # type: ignore[attr-defined]

        db.add_all(
            [
                SignalRecord(
                    feedback_id=s.feedback_id,
                    signal_type=s.signal_type,
                    signal_value=s.signal_value,
                    confidence=s.confidence,
                )
                for s in signals
            ]
        )
        await db.flush()

        return len(signals)


classification_ops = ClassificationOperations()
signal_ops = SignalOperations()
