"""Classification endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.api.deps import get_classifier
from feedback_intel.config import settings
from feedback_intel.core.database import get_direct_db
from feedback_intel.core.exceptions import NotFoundError
from feedback_intel.domain.feedback_operations import feedback_ops
from feedback_intel.services.classification_runner import ClassificationRunner
from feedback_intel.services.classifier import FeedbackClassifier

router = APIRouter(prefix="/classify", tags=["classify"])


@router.post("")
async def classify_pending(
    limit: int = Query(default=settings.classify_batch_limit, ge=1, le=100),
    db: AsyncSession = Depends(get_direct_db),
    classifier: FeedbackClassifier = Depends(get_classifier),
) -> dict[str, Any]:
    """
    Classify pending feedback, serving recent results from the classification cache.

    Items are classified one at a time; an LLM failure aborts the request.
    """
    report = await ClassificationRunner(classifier).classify_pending(db, limit)

    if not report.classified:
        return {"success": True, "message": "No unclassified feedback", "classified": []}

    return {"success": True, "classified": report.classified}


@router.post("/{feedback_id}")
async def reclassify_feedback(
    feedback_id: str,
    db: AsyncSession = Depends(get_direct_db),
    classifier: FeedbackClassifier = Depends(get_classifier),
) -> dict[str, Any]:
    """Classify a single item again, replacing its stored classification and signals."""
    feedback = await feedback_ops.get(db, feedback_id)
    if not feedback:
        raise NotFoundError("Feedback")

    outcome = await ClassificationRunner(classifier).reclassify(db, feedback)
    return {
        "success": True,
        "classification": outcome.classification.to_dict(),
        "signals": [
            {
                "signal_type": s.signal_type,
                "signal_value": s.signal_value,
                "confidence": s.confidence,
            }
            for s in outcome.signals
        ],
        "used_fallback": outcome.used_fallback,
    }
