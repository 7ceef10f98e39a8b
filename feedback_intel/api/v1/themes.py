from typing import Any

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.api.deps import get_classifier
from feedback_intel.core.database import get_direct_db
from feedback_intel.domain.feedback_operations import feedback_ops
from feedback_intel.services.classification_runner import to_feedback_item
from feedback_intel.services.classifier import FeedbackClassifier
from feedback_intel.services.classifier.constants import DEFAULT_THEME_LIMIT, THEME_MAX_ITEMS

router = APIRouter(prefix="/themes", tags=["themes"])


class ThemesRequest(BaseModel):
    limit: int = Field(default=DEFAULT_THEME_LIMIT, ge=1, le=20)


@router.post("")
async def extract_themes(
    data: ThemesRequest | None = None,
    db: AsyncSession = Depends(get_direct_db),
    classifier: FeedbackClassifier = Depends(get_classifier),
) -> dict[str, Any]:
    """Extract common themes from the most recent feedback. Best effort."""
    limit = data.limit if data else DEFAULT_THEME_LIMIT
    recent = await feedback_ops.list_with_classifications(db, limit=THEME_MAX_ITEMS)
    themes = await classifier.extract_themes([to_feedback_item(f) for f in recent], limit)
    return {"themes": themes}
