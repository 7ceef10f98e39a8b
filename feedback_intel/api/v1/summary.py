"""PM summary endpoints."""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.api.deps import get_classifier
from feedback_intel.config import settings
from feedback_intel.core.database import get_db, get_direct_db
from feedback_intel.core.exceptions import RateLimitedError
from feedback_intel.domain.summary_operations import summary_ops
from feedback_intel.services.classifier import FeedbackClassifier
from feedback_intel.services.config_store import config_store
from feedback_intel.services.reporting import generate_period_summary

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/summary", tags=["summary"])


class SummaryRequest(BaseModel):
    days: int = Field(default=7, ge=1, le=365)


@router.post("")
async def create_summary(
    data: SummaryRequest | None = None,
    db: AsyncSession = Depends(get_direct_db),
    classifier: FeedbackClassifier = Depends(get_classifier),
) -> dict[str, Any]:
    """Generate, store and return an AI PM summary for the trailing period."""
    days = data.days if data else 7

    allowed = await config_store.check_rate_limit(
        db,
        "summary",
        settings.summary_rate_limit_requests,
        settings.summary_rate_limit_window_seconds,
    )
    if not allowed:
        logger.warning("Summary generation rate limit exceeded")
        raise RateLimitedError(settings.summary_rate_limit_window_seconds)

    result = await generate_period_summary(db, classifier, days)
    return {
        "success": True,
        "summary": result.summary,
        "metrics": result.metrics.to_dict(),
    }


@router.get("")
async def list_summaries(
    summary_type: str | None = None,
    limit: int = Query(default=10, ge=1, le=100),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List stored summaries, newest first."""
    summaries = await summary_ops.list_recent(db, summary_type=summary_type, limit=limit)
    return {"summaries": [s.model_dump(mode="json") for s in summaries]}
