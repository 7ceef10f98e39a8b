"""Feedback ingestion endpoint."""

import logging
from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.core.database import get_db
from feedback_intel.domain.feedback_operations import feedback_ops
from feedback_intel.models.feedback import FeedbackCreate

logger = logging.getLogger(__name__)

router = APIRouter(tags=["ingest"])


@router.post("/ingest")
async def ingest_feedback(
    data: FeedbackCreate | list[FeedbackCreate],
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Ingest one feedback item or a list of them. Existing ids are replaced."""
    items = data if isinstance(data, list) else [data]
    ingested = await feedback_ops.ingest_batch(db, items)
    logger.info(f"Ingested {ingested} feedback items")
    return {"success": True, "ingested": ingested}
