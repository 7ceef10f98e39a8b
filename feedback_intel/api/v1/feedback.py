"""Feedback listing endpoints."""

from typing import Any

from fastapi import APIRouter, Depends, Query
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.core.database import get_db
from feedback_intel.core.exceptions import NotFoundError
from feedback_intel.domain.classification_operations import classification_ops, signal_ops
from feedback_intel.domain.feedback_operations import feedback_ops

router = APIRouter(prefix="/feedback", tags=["feedback"])


@router.get("")
async def list_feedback(
    limit: int = Query(default=100, ge=1, le=1000),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List feedback with its classification (if any), newest first."""
    items = await feedback_ops.list_with_classifications(db, limit=limit)
    return {"feedback": [item.model_dump(mode="json") for item in items]}


@router.get("/{feedback_id}")
async def get_feedback(
    feedback_id: str,
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get one feedback item with its classification and signals."""
    feedback = await feedback_ops.get(db, feedback_id)
    if not feedback:
        raise NotFoundError("Feedback")

    classification = await classification_ops.get_by_feedback_id(db, feedback_id)
    signals = await signal_ops.list_for_feedback(db, feedback_id)

    return {
        "feedback": feedback.model_dump(mode="json"),
        "classification": classification.model_dump(mode="json") if classification else None,
        "signals": [s.model_dump(mode="json", exclude={"id"}) for s in signals],
    }
