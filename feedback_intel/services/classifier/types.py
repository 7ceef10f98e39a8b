"""
Classifier data types.

Rule configuration is a pydantic model because it arrives as JSON from the
config store or the API and must be validated at that boundary. Everything
produced by the pipeline is a frozen dataclass.
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict
from pydantic import ValidationError as PydanticValidationError

from feedback_intel.core.exceptions import RuleConfigurationError

# Closed integer ranges for each classification axis
AXIS_RANGES: dict[str, tuple[int, int]] = {
    "urgency": (1, 5),
    "sentiment": (-2, 2),
    "impact": (1, 5),
    "actionability": (1, 5),
}


# ---------------------------------------------------------------------------
# Rule configuration
# ---------------------------------------------------------------------------


class _RuleModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")


class ImmediateEngineeringRule(_RuleModel):
    urgency_min: int
    impact_min: int


class QuickWinRule(_RuleModel):
    urgency_max: int
    actionability_min: int


class TrustRiskRule(_RuleModel):
    sentiment_max: int
    impact_min: int


class RoutingRules(_RuleModel):
    immediate_engineering: ImmediateEngineeringRule
    quick_win_backlog: QuickWinRule
    trust_risk: TrustRiskRule


class UrgencyKeywords(_RuleModel):
    critical: list[str] = []
    high: list[str] = []
    low: list[str] = []


class ImpactSignals(_RuleModel):
    enterprise: list[str] = []
    production: list[str] = []
    single_user: list[str] = []


class RuleConfiguration(_RuleModel):
    """Routing thresholds plus keyword hints rendered into the prompt.

    Every threshold is required. Keyword lists only shape prompt text;
    they are never matched programmatically.
    """

    routing_rules: RoutingRules
    urgency_keywords: UrgencyKeywords
    impact_signals: ImpactSignals

    @classmethod
    def from_dict(cls, data: Any) -> "RuleConfiguration":
        """Validate raw JSON-like data, raising RuleConfigurationError on failure."""
        try:
            return cls.model_validate(data)
        except PydanticValidationError as e:
            raise RuleConfigurationError(f"Invalid rule configuration: {e}") from e


# ---------------------------------------------------------------------------
# Pipeline input and output
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FeedbackItem:
    """Source-agnostic feedback input for classification."""

    id: str
    source: str
    title: str
    content: str
    label: str | None = None
    author: str | None = None
    created_at: datetime | None = None


@dataclass(frozen=True)
class ClassificationVector:
    """The four classification axes. See AXIS_RANGES for valid values."""

    urgency: int
    sentiment: int
    impact: int
    actionability: int


@dataclass(frozen=True)
class ParsedSignal:
    """A signal as returned by the model, before it is tied to a feedback item."""

    signal_type: str
    signal_value: str
    confidence: float | None = None


@dataclass(frozen=True)
class Signal:
    """A typed, weakly-confident fact extracted from a feedback item."""

    feedback_id: str
    signal_type: str
    signal_value: str
    confidence: float | None = None


@dataclass(frozen=True)
class ClassificationResult:
    """Classification of one feedback item, including its route."""

    feedback_id: str
    urgency: int
    sentiment: int
    impact: int
    actionability: int
    route: str
    confidence: float | None = None
    reasoning: str | None = None

    @property
    def vector(self) -> ClassificationVector:
        return ClassificationVector(
            urgency=self.urgency,
            sentiment=self.sentiment,
            impact=self.impact,
            actionability=self.actionability,
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ClassificationOutcome:
    """Everything one classify() call produces."""

    classification: ClassificationResult
    signals: list[Signal] = field(default_factory=list)
    used_fallback: bool = False


# ---------------------------------------------------------------------------
# Parse outcome
# ---------------------------------------------------------------------------


class ParseFailureStage(str, Enum):
    """Where parsing a model response failed."""

    EXTRACTION = "extraction"  # No {...} substring in the response
    DECODE = "decode"  # Substring is not valid JSON
    VALIDATION = "validation"  # Valid JSON, wrong shape or out-of-range values


@dataclass(frozen=True)
class ValidParse:
    vector: ClassificationVector
    signals: tuple[ParsedSignal, ...] = ()
    confidence: float | None = None
    reasoning: str | None = None


@dataclass(frozen=True)
class InvalidParse:
    stage: ParseFailureStage
    reason: str


ParseOutcome: TypeAlias = ValidParse | InvalidParse


# ---------------------------------------------------------------------------
# Summary input
# ---------------------------------------------------------------------------


@dataclass
class FeedbackMetrics:
    """Aggregate metrics over a reporting period."""

    total: int = 0
    by_route: list[dict[str, Any]] = field(default_factory=list)  # [{route, count}]
    by_source: list[dict[str, Any]] = field(default_factory=list)  # [{source, count}]
    averages: dict[str, float | None] = field(default_factory=dict)
    # averages keys: avg_urgency, avg_sentiment, avg_impact, avg_actionability

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)
