"""Configuration package."""

from feedback_intel.config.settings import Settings, settings

__all__ = [
    "Settings",
    "settings",
]
