from feedback_intel.api.v1 import (
    classify,
    config,
    dashboard,
    feedback,
    ingest,
    meta,
    seed,
    summary,
    themes,
)

__all__ = [
    "classify",
    "config",
    "dashboard",
    "feedback",
    "ingest",
    "meta",
    "seed",
    "summary",
    "themes",
]
