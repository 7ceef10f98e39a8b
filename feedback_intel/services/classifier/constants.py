"""
Classifier constants.

Route labels, fallback values, prompt limits and system personas.
"""

# Route labels (evaluation order matters, see rules.route)
ROUTE_IMMEDIATE_ENGINEERING = "immediate_engineering"
ROUTE_QUICK_WIN_BACKLOG = "quick_win_backlog"
ROUTE_TRUST_RISK = "trust_risk"
ROUTE_STANDARD_BACKLOG = "standard_backlog"
ROUTE_SEPARATOR = ","

# Conservative classification used when the model response is unusable
FALLBACK_URGENCY = 3
FALLBACK_SENTIMENT = 0
FALLBACK_IMPACT = 3
FALLBACK_ACTIONABILITY = 2
FALLBACK_CONFIDENCE = 0.3
FALLBACK_REASONING = "Failed to parse AI response, using conservative defaults"

# Summary prompt limits
SUMMARY_ITEMS_PER_BUCKET = 5

# Theme extraction limits
THEME_MAX_ITEMS = 20
THEME_SNIPPET_CHARS = 200
DEFAULT_THEME_LIMIT = 5

# System personas
CLASSIFICATION_SYSTEM_PROMPT = (
    "You are a product analyst for cloudflare/cloudflared, an infrastructure tool "
    "where reliability and security are critical. Analyze user feedback and return "
    "structured JSON only. No explanations outside the JSON."
)
SUMMARY_SYSTEM_PROMPT = "You are a senior product analyst creating executive summaries."
THEME_SYSTEM_PROMPT = "Extract themes from feedback. Return only JSON array."
