"""Domain operations for PM summaries."""

from datetime import datetime
from typing import Any

from sqlalchemy import desc, select
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.domain.base_operations import BaseOperations
from feedback_intel.models.summary import Summary


class SummaryOperations(BaseOperations[Summary]):
    """Create and list generated summaries."""

    def __init__(self) -> None:
        super().__init__(Summary)

    async def store(
        self,
        db: AsyncSession,
        period_start: datetime,
        period_end: datetime,
        summary_type: str,
        content: str,
        metrics: dict[str, Any] | None = None,
    ) -> Summary:
        """Persist a generated summary with a snapshot of its metrics."""
        summary = Summary(
            period_start=period_start,
            period_end=period_end,
            summary_type=summary_type,
            content=content,
            metrics=metrics,
        )
        db.add(summary)
        await db.flush()
        await db.refresh(summary)
        return summary

    async def list_recent(
        self,
        db: AsyncSession,
        summary_type: str | None = None,
        limit: int = 10,
    ) -> list[Summary]:
        statement = select(Summary)
        if summary_type:
            statement = statement.where(Summary.summary_type == summary_type)
        statement = statement.order_by(desc(Summary.created_at)).limit(limit)
        result = await db.execute(statement)
        return list(result.scalars().all())


summary_ops = SummaryOperations()
