"""PM dashboard data and AI summaries over a reporting period."""

import logging
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.domain.feedback_operations import feedback_ops
from feedback_intel.domain.summary_operations import summary_ops
from feedback_intel.models.feedback import FeedbackWithClassification
from feedback_intel.services.classifier import (
    ROUTE_IMMEDIATE_ENGINEERING,
    ROUTE_QUICK_WIN_BACKLOG,
    ROUTE_STANDARD_BACKLOG,
    ROUTE_TRUST_RISK,
    FeedbackClassifier,
    FeedbackMetrics,
)

logger = logging.getLogger(__name__)

QUEUE_SIZE = 10
SUMMARY_ITEMS_PER_ROUTE = 20


def period_bounds(days: int, now: datetime | None = None) -> tuple[datetime, datetime]:
    """Return (start, end) for the trailing ``days`` days ending now."""
    end = now or datetime.now(UTC)
    return end - timedelta(days=days), end


@dataclass
class PeriodSummary:
    summary: str
    metrics: FeedbackMetrics
    period_start: datetime
    period_end: datetime


async def build_dashboard(db: AsyncSession, days: int) -> dict[str, Any]:
    """Collect metrics, the three work queues and trending signals."""
    start, end = period_bounds(days)

    metrics = await feedback_ops.get_metrics(db, start, end)
    immediate = await feedback_ops.get_by_route(db, ROUTE_IMMEDIATE_ENGINEERING, QUEUE_SIZE)
    trust_risk = await feedback_ops.get_by_route(db, ROUTE_TRUST_RISK, QUEUE_SIZE)
    quick_wins = await feedback_ops.get_by_route(db, ROUTE_QUICK_WIN_BACKLOG, QUEUE_SIZE)
    trends = await feedback_ops.get_trending_signals(db, days=days, limit=QUEUE_SIZE)

    return {
        "period": {"start": start.isoformat(), "end": end.isoformat(), "days": days},
        "metrics": metrics.to_dict(),
        "queues": {
            "immediate_engineering": [f.model_dump(mode="json") for f in immediate],
            "trust_risk": [f.model_dump(mode="json") for f in trust_risk],
            "quick_wins": [f.model_dump(mode="json") for f in quick_wins],
        },
        "trending_signals": trends,
    }


async def generate_period_summary(
    db: AsyncSession,
    classifier: FeedbackClassifier,
    days: int,
    summary_type: str = "weekly",
) -> PeriodSummary:
    """
    Generate and store a PM summary for the trailing ``days`` days.

    LLM errors propagate; nothing is stored unless generation succeeds.
    """
    start, end = period_bounds(days)
    metrics = await feedback_ops.get_metrics(db, start, end)

    # Multi-route items come back from more than one query; keep the first copy
    feedback_items: dict[str, FeedbackWithClassification] = {}
    for route_label in (
        ROUTE_IMMEDIATE_ENGINEERING,
        ROUTE_TRUST_RISK,
        ROUTE_QUICK_WIN_BACKLOG,
        ROUTE_STANDARD_BACKLOG,
    ):
        for item in await feedback_ops.get_by_route(db, route_label, SUMMARY_ITEMS_PER_ROUTE):
            feedback_items.setdefault(item.id, item)

    summary = await classifier.generate_summary(
        list(feedback_items.values()), metrics, f"Last {days} days"
    )
    await summary_ops.store(db, start, end, summary_type, summary, metrics.to_dict())
    logger.info(f"Generated {summary_type} summary over {len(feedback_items)} items")

    return PeriodSummary(summary=summary, metrics=metrics, period_start=start, period_end=end)
