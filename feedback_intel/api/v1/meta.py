"""Health check and self-description endpoints."""

from datetime import UTC, datetime
from typing import Any

from fastapi import APIRouter

from feedback_intel.config import settings

router = APIRouter(tags=["meta"])

API_DESCRIPTION: dict[str, Any] = {
    "name": "Feedback Intelligence Agent",
    "version": "1.0.0",
    "description": (
        "Aggregates and analyzes user feedback using LLMs to produce actionable PM summaries"
    ),
    "endpoints": {
        "POST /api/ingest": "Ingest feedback from any source",
        "POST /api/classify": "Classify pending feedback using AI",
        "POST /api/classify/{feedback_id}": "Reclassify a single feedback item",
        "GET /api/feedback": "Get all feedback with classifications",
        "GET /api/feedback/{feedback_id}": "Get one feedback item with signals",
        "GET /api/dashboard": "Get PM dashboard data with metrics",
        "POST /api/summary": "Generate AI-powered PM summary",
        "GET /api/summary": "List stored summaries",
        "POST /api/themes": "Extract common themes from recent feedback",
        "GET /api/config/rules": "Get classification rules",
        "PUT /api/config/rules": "Update classification rules",
        "GET /api/config/sources": "Get source configurations",
        "POST /api/seed": "Seed sample cloudflared data for testing",
        "GET /api/health": "Health check",
    },
    "classification_framework": {
        "urgency": "1 (Low) to 5 (Critical)",
        "sentiment": "-2 (Frustrated) to +2 (Enthusiastic)",
        "impact": "1 (Minimal) to 5 (Severe)",
        "actionability": "1 (Unclear) to 5 (Immediately Actionable)",
    },
    "routing_rules": {
        "immediate_engineering": "Urgency >= 4 AND Impact >= 4",
        "quick_win_backlog": "Urgency <= 2 AND Actionability >= 4",
        "trust_risk": "Sentiment <= -1 AND Impact >= 3",
    },
}


def health_payload() -> dict[str, Any]:
    return {
        "status": "healthy",
        "timestamp": datetime.now(UTC).isoformat(),
        "llm_configured": settings.llm_enabled,
        "scheduler_enabled": settings.scheduler_enabled,
    }


@router.get("/health")
async def api_health() -> dict[str, Any]:
    return health_payload()

