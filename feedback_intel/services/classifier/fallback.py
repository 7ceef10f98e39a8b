"""
Classifier fallback logic.

Provides the fixed conservative classification substituted when a model
response cannot be extracted, decoded or validated.
"""

import logging

from feedback_intel.services.classifier.constants import (
    FALLBACK_ACTIONABILITY,
    FALLBACK_CONFIDENCE,
    FALLBACK_IMPACT,
    FALLBACK_REASONING,
    FALLBACK_SENTIMENT,
    FALLBACK_URGENCY,
)
from feedback_intel.services.classifier.types import (
    ClassificationVector,
    ParseOutcome,
    ValidParse,
)

logger = logging.getLogger(__name__)

FALLBACK_VECTOR = ClassificationVector(
    urgency=FALLBACK_URGENCY,
    sentiment=FALLBACK_SENTIMENT,
    impact=FALLBACK_IMPACT,
    actionability=FALLBACK_ACTIONABILITY,
)

FALLBACK_PARSE = ValidParse(
    vector=FALLBACK_VECTOR,
    signals=(),
    confidence=FALLBACK_CONFIDENCE,
    reasoning=FALLBACK_REASONING,
)


def resolve_parse_outcome(
    outcome: ParseOutcome,
    response_text: str,
    feedback_id: str | None = None,
) -> tuple[ValidParse, bool]:
    """
    Select the parse to classify with.

    Args:
        outcome: Result of parsing the model response
        response_text: Raw response, logged on failure for operators
        feedback_id: Optional feedback id for log context

    Returns:
        (parse to use, whether the fallback was substituted)
    """
    if isinstance(outcome, ValidParse):
        return outcome, False

    logger.warning(
        f"Failed to parse AI response for feedback {feedback_id} "
        f"({outcome.stage.value}): {outcome.reason}. Response: {response_text!r}"
    )
    return FALLBACK_PARSE, True
