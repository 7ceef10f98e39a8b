from fastapi import HTTPException, status

from feedback_intel.config import settings
from feedback_intel.services.classifier import FeedbackClassifier


def get_classifier() -> FeedbackClassifier:
    """Dependency that provides the LLM-backed classifier.

    Raises 503 when no Anthropic API key is configured.
    """
    if not settings.llm_enabled:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="LLM provider not configured",
        )
    return FeedbackClassifier()
