"""
Classifier package for LLM-based feedback scoring and routing.

Module structure:
- classifier.py: Main FeedbackClassifier class
- types.py: Data types (RuleConfiguration, ClassificationResult, Signal, ...)
- constants.py: Route labels, fallback values and system prompts
- prompts.py: Prompt builders for classification, summaries and themes
- parser.py: Response extraction and validation
- fallback.py: Conservative default classification
- rules.py: Threshold-based routing
- llm.py: Chat completion protocol and Anthropic implementation
"""

from feedback_intel.services.classifier.classifier import FeedbackClassifier
from feedback_intel.services.classifier.constants import (
    ROUTE_IMMEDIATE_ENGINEERING,
    ROUTE_QUICK_WIN_BACKLOG,
    ROUTE_STANDARD_BACKLOG,
    ROUTE_TRUST_RISK,
)
from feedback_intel.services.classifier.fallback import FALLBACK_PARSE, FALLBACK_VECTOR
from feedback_intel.services.classifier.llm import (
    AnthropicChatCompletion,
    ChatCompletion,
    ChatMessage,
)
from feedback_intel.services.classifier.parser import (
    parse_classification_response,
    parse_themes_response,
)
from feedback_intel.services.classifier.rules import route
from feedback_intel.services.classifier.types import (
    ClassificationOutcome,
    ClassificationResult,
    ClassificationVector,
    FeedbackItem,
    FeedbackMetrics,
    InvalidParse,
    ParseFailureStage,
    ParseOutcome,
    RuleConfiguration,
    Signal,
    ValidParse,
)

__all__ = [
    # Main class
    "FeedbackClassifier",
    # LLM capability
    "AnthropicChatCompletion",
    "ChatCompletion",
    "ChatMessage",
    # Types
    "ClassificationOutcome",
    "ClassificationResult",
    "ClassificationVector",
    "FeedbackItem",
    "FeedbackMetrics",
    "InvalidParse",
    "ParseFailureStage",
    "ParseOutcome",
    "RuleConfiguration",
    "Signal",
    "ValidParse",
    # Constants
    "FALLBACK_PARSE",
    "FALLBACK_VECTOR",
    "ROUTE_IMMEDIATE_ENGINEERING",
    "ROUTE_QUICK_WIN_BACKLOG",
    "ROUTE_STANDARD_BACKLOG",
    "ROUTE_TRUST_RISK",
    # Utilities
    "parse_classification_response",
    "parse_themes_response",
    "route",
]
