"""Classification rule and source configuration endpoints."""

from typing import Any

from fastapi import APIRouter, Body, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.core.database import get_db
from feedback_intel.core.exceptions import RuleConfigurationError, ValidationError
from feedback_intel.services.config_store import config_store

router = APIRouter(prefix="/config", tags=["config"])


@router.get("/rules")
async def get_rules(db: AsyncSession = Depends(get_db)) -> dict[str, Any]:
    rules = await config_store.get_classification_rules(db)
    return rules.model_dump()


@router.put("/rules")
async def update_rules(
    updates: dict[str, Any] = Body(...),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """
    Merge top-level rule sections onto the active configuration.

    Each supplied section replaces the stored one wholesale; the merged
    configuration must still be complete.
    """
    try:
        await config_store.update_classification_rules(db, updates)
    except RuleConfigurationError as e:
        raise ValidationError(str(e)) from e
    return {"success": True}


@router.get("/sources")
async def get_sources(db: AsyncSession = Depends(get_db)) -> list[dict[str, Any]]:
    return await config_store.get_source_configs(db)
