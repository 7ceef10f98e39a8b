"""
Classifier response parsing.

Parses and validates the model's JSON responses. Extraction is tolerant
(the model sometimes wraps JSON in prose or markdown) but decoding and
validation are strict, and each failure is reported with its stage.
"""

import json
import logging
from typing import Any

from feedback_intel.services.classifier.types import (
    AXIS_RANGES,
    ClassificationVector,
    InvalidParse,
    ParsedSignal,
    ParseFailureStage,
    ParseOutcome,
    ValidParse,
)

logger = logging.getLogger(__name__)


def extract_json_object(response_text: str) -> str | None:
    """Return the substring from the first '{' to the last '}', or None."""
    start = response_text.find("{")
    end = response_text.rfind("}")
    if start == -1 or end < start:
        return None
    return response_text[start : end + 1]


def extract_json_array(response_text: str) -> str | None:
    """Return the substring from the first '[' to the last ']', or None."""
    start = response_text.find("[")
    end = response_text.rfind("]")
    if start == -1 or end < start:
        return None
    return response_text[start : end + 1]


def _is_number(value: Any) -> bool:
    return isinstance(value, int | float) and not isinstance(value, bool)


def _axis_value(classification: dict[str, Any], axis: str) -> int | None:
    """Return the axis as an int if it is an integral number within range."""
    value = classification.get(axis)
    if not _is_number(value):
        return None
    if isinstance(value, float) and not value.is_integer():
        return None
    low, high = AXIS_RANGES[axis]
    as_int = int(value)
    if not low <= as_int <= high:
        return None
    return as_int


def _probability(value: Any) -> float | None:
    """Return value as a float in [0, 1], or None when missing or invalid."""
    if not _is_number(value):
        return None
    if not 0 <= value <= 1:
        return None
    return float(value)


def _parse_signals(raw_signals: Any) -> tuple[ParsedSignal, ...] | None:
    """Parse the signals array. Returns None if it is present but not a list."""
    if raw_signals is None:
        return ()
    if not isinstance(raw_signals, list):
        return None

    signals: list[ParsedSignal] = []
    for raw in raw_signals:
        if not isinstance(raw, dict):
            continue
        signal_type = raw.get("signal_type")
        signal_value = raw.get("signal_value")
        if not isinstance(signal_type, str) or not isinstance(signal_value, str):
            continue
        signals.append(
            ParsedSignal(
                signal_type=signal_type,
                signal_value=signal_value,
                confidence=_probability(raw.get("confidence")),
            )
        )
    return tuple(signals)


def validate_classification_payload(parsed: Any) -> ParseOutcome:
    """
    Validate a decoded JSON value against the classification contract.

    All four axes must be integral numbers within their ranges. Malformed
    individual signals are dropped; an unusable top-level confidence or
    reasoning becomes None rather than failing the whole response.
    """
    if not isinstance(parsed, dict):
        return InvalidParse(ParseFailureStage.VALIDATION, "Response JSON is not an object")

    classification = parsed.get("classification")
    if not isinstance(classification, dict):
        return InvalidParse(
            ParseFailureStage.VALIDATION, "Missing or non-object 'classification'"
        )

    axes: dict[str, int] = {}
    for axis, (low, high) in AXIS_RANGES.items():
        value = _axis_value(classification, axis)
        if value is None:
            return InvalidParse(
                ParseFailureStage.VALIDATION,
                f"'{axis}' must be an integer in [{low}, {high}], "
                f"got {classification.get(axis)!r}",
            )
        axes[axis] = value

    signals = _parse_signals(parsed.get("signals"))
    if signals is None:
        return InvalidParse(ParseFailureStage.VALIDATION, "'signals' is not a list")

    reasoning = parsed.get("reasoning")

    return ValidParse(
        vector=ClassificationVector(**axes),
        signals=signals,
        confidence=_probability(parsed.get("confidence")),
        reasoning=reasoning if isinstance(reasoning, str) else None,
    )


def parse_classification_response(response_text: str) -> ParseOutcome:
    """
    Parse a raw classification response.

    Handles various response formats including:
    - Raw JSON objects
    - JSON in markdown code blocks
    - JSON surrounded by explanatory prose

    Args:
        response_text: Raw response text from the model

    Returns:
        ValidParse, or InvalidParse naming the failing stage
    """
    candidate = extract_json_object(response_text)
    if candidate is None:
        return InvalidParse(ParseFailureStage.EXTRACTION, "No JSON object found in response")

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        return InvalidParse(ParseFailureStage.DECODE, f"Invalid JSON: {e}")

    return validate_classification_payload(parsed)


def parse_themes_response(response_text: str) -> list[str]:
    """
    Parse a theme-extraction response into a list of theme strings.

    Best effort: any failure is logged and yields an empty list.
    Non-string entries are dropped.
    """
    candidate = extract_json_array(response_text)
    if candidate is None:
        logger.warning("Failed to parse themes: no JSON array in response")
        return []

    try:
        parsed = json.loads(candidate)
    except json.JSONDecodeError as e:
        logger.warning(f"Failed to parse themes: {e}")
        return []

    if not isinstance(parsed, list):
        logger.warning("Failed to parse themes: JSON value is not an array")
        return []

    return [theme for theme in parsed if isinstance(theme, str)]
