from typing import Any

from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.core.database import get_db
from feedback_intel.domain.feedback_operations import feedback_ops
from feedback_intel.services.sample_data import get_sample_feedback

router = APIRouter(tags=["seed"])


@router.post("/seed")
async def seed_sample_data(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    """Ingest sample cloudflared issues for local testing."""
    seeded = await feedback_ops.ingest_batch(db, get_sample_feedback())
    return {"success": True, "seeded": seeded}
