"""
Rule-based routing of classified feedback into work queues.

Pure functions, no I/O. The joined route string is stored as-is, so the
evaluation order below is part of the stored data format.
"""

from feedback_intel.services.classifier.constants import (
    ROUTE_IMMEDIATE_ENGINEERING,
    ROUTE_QUICK_WIN_BACKLOG,
    ROUTE_SEPARATOR,
    ROUTE_STANDARD_BACKLOG,
    ROUTE_TRUST_RISK,
)
from feedback_intel.services.classifier.types import ClassificationVector, RuleConfiguration


def matched_routes(vector: ClassificationVector, rules: RuleConfiguration) -> list[str]:
    """Return every route label whose predicate holds, in evaluation order."""
    thresholds = rules.routing_rules
    routes: list[str] = []

    immediate = thresholds.immediate_engineering
    if vector.urgency >= immediate.urgency_min and vector.impact >= immediate.impact_min:
        routes.append(ROUTE_IMMEDIATE_ENGINEERING)

    quick_win = thresholds.quick_win_backlog
    if (
        vector.urgency <= quick_win.urgency_max
        and vector.actionability >= quick_win.actionability_min
    ):
        routes.append(ROUTE_QUICK_WIN_BACKLOG)

    trust_risk = thresholds.trust_risk
    if vector.sentiment <= trust_risk.sentiment_max and vector.impact >= trust_risk.impact_min:
        routes.append(ROUTE_TRUST_RISK)

    return routes


def route(vector: ClassificationVector, rules: RuleConfiguration) -> str:
    """
    Assign a feedback item to one or more work queues.

    Args:
        vector: Validated classification axes
        rules: Complete rule configuration

    Returns:
        Comma-joined matched labels, or "standard_backlog" when none match
    """
    routes = matched_routes(vector, rules)
    return ROUTE_SEPARATOR.join(routes) if routes else ROUTE_STANDARD_BACKLOG
