"""
Configuration, caching and bookkeeping on top of the key-value store.

Holds the documented default classification rules and source configs;
the classifier and rule engine never embed defaults themselves.

Rules are additionally held in a short in-process TTL cache so a batch
of classifications does not re-read and re-validate them per item.
"""

import json
import logging
import time
from typing import Any

from cachetools import TTLCache  # type: ignore[import-untyped]
from sqlalchemy.ext.asyncio import AsyncSession

from feedback_intel.config import settings
from feedback_intel.domain.kv_operations import kv_ops
from feedback_intel.services.classifier.types import RuleConfiguration

logger = logging.getLogger(__name__)

RULES_KEY = "classification_rules"
SOURCES_KEY = "source_configs"

DEFAULT_CLASSIFICATION_RULES: dict[str, Any] = {
    "routing_rules": {
        "immediate_engineering": {"urgency_min": 4, "impact_min": 4},
        "quick_win_backlog": {"urgency_max": 2, "actionability_min": 4},
        "trust_risk": {"sentiment_max": -1, "impact_min": 3},
    },
    "urgency_keywords": {
        "critical": [
            "security",
            "vulnerability",
            "cannot install",
            "data loss",
            "outage",
            "production down",
            "breach",
            "exploit",
        ],
        "high": [
            "production",
            "enterprise",
            "fails consistently",
            "no workaround",
            "blocked",
            "critical",
            "urgent",
            "forever",
            "never recovers",
        ],
        "low": [
            "feature request",
            "nice to have",
            "suggestion",
            "question",
            "wondering",
            "curious",
            "would be nice",
        ],
    },
    "impact_signals": {
        "enterprise": [
            "our organization",
            "our team",
            "enterprise",
            "active directory",
            "domain-joined",
            "cluster",
            "our company",
            "multiple users",
        ],
        "production": [
            "production",
            "live",
            "customers affected",
            "revenue",
            "sla",
            "downtime",
            "outage",
        ],
        "single_user": [
            "my home",
            "personal",
            "hobby",
            "just me",
            "learning",
            "testing",
            "playing around",
        ],
    },
}

DEFAULT_SOURCE_CONFIGS: list[dict[str, Any]] = [
    {
        "name": "github-issues",
        "type": "github",
        "enabled": True,
        "api_endpoint": "https://api.github.com/repos/cloudflare/cloudflared/issues",
        "polling_interval_minutes": 15,
    },
    {"name": "discord-feedback", "type": "discord", "enabled": False},
    {"name": "support-tickets", "type": "zendesk", "enabled": False},
]

_rules_cache: TTLCache[str, RuleConfiguration] = TTLCache(
    maxsize=1, ttl=settings.rules_memory_cache_ttl_seconds
)


class ConfigStore:
    """Typed accessors for everything the service keeps in the KV store."""

    # ─────────────────────────────────────────────────────────────────────
    # Classification rules
    # ─────────────────────────────────────────────────────────────────────

    async def get_classification_rules(self, db: AsyncSession) -> RuleConfiguration:
        """
        Return the active rule configuration.

        Falls back to DEFAULT_CLASSIFICATION_RULES (written back with a 24h
        TTL) when nothing is stored. Raises RuleConfigurationError if the
        stored rules are incomplete.
        """
        if RULES_KEY in _rules_cache:
            return _rules_cache[RULES_KEY]

        stored = await kv_ops.get(db, RULES_KEY)
        if stored is not None:
            rules = RuleConfiguration.from_dict(json.loads(stored))
        else:
            rules = RuleConfiguration.from_dict(DEFAULT_CLASSIFICATION_RULES)
            await kv_ops.put(
                db,
                RULES_KEY,
                json.dumps(DEFAULT_CLASSIFICATION_RULES),
                ttl_seconds=settings.rules_cache_ttl_seconds,
            )
            logger.info("Seeded default classification rules")

        _rules_cache[RULES_KEY] = rules
        return rules

    async def update_classification_rules(
        self,
        db: AsyncSession,
        updates: dict[str, Any],
    ) -> RuleConfiguration:
        """
        Merge top-level sections of ``updates`` onto the current rules.

        The merged result is validated before anything is written, so an
        incomplete section is rejected rather than stored.
        """
        current = await self.get_classification_rules(db)
        merged = {**current.model_dump(), **updates}
        rules = RuleConfiguration.from_dict(merged)

        await kv_ops.put(db, RULES_KEY, rules.model_dump_json())
        _rules_cache.clear()
        return rules

    # ─────────────────────────────────────────────────────────────────────
    # Source configs
    # ─────────────────────────────────────────────────────────────────────

    async def get_source_configs(self, db: AsyncSession) -> list[dict[str, Any]]:
        stored = await kv_ops.get(db, SOURCES_KEY)
        if stored is not None:
            return json.loads(stored)

        await kv_ops.put(db, SOURCES_KEY, json.dumps(DEFAULT_SOURCE_CONFIGS))
        return DEFAULT_SOURCE_CONFIGS

    async def update_source_configs(
        self,
        db: AsyncSession,
        configs: list[dict[str, Any]],
    ) -> None:
        await kv_ops.put(db, SOURCES_KEY, json.dumps(configs))

    # ─────────────────────────────────────────────────────────────────────
    # Classification cache (deduplication within a short window)
    # ─────────────────────────────────────────────────────────────────────

    async def cache_classification(
        self,
        db: AsyncSession,
        feedback_id: str,
        classification: dict[str, Any],
        ttl_seconds: int | None = None,
    ) -> None:
        await kv_ops.put(
            db,
            f"classification:{feedback_id}",
            json.dumps(classification),
            ttl_seconds=ttl_seconds or settings.classification_cache_ttl_seconds,
        )

    async def get_cached_classification(
        self,
        db: AsyncSession,
        feedback_id: str,
    ) -> dict[str, Any] | None:
        stored = await kv_ops.get(db, f"classification:{feedback_id}")
        return json.loads(stored) if stored is not None else None

    async def clear_classification_cache(self, db: AsyncSession, feedback_id: str) -> None:
        """Drop the cached classification (used before reclassifying)."""
        await kv_ops.delete(db, f"classification:{feedback_id}")

    # ─────────────────────────────────────────────────────────────────────
    # Prompt templates
    # ─────────────────────────────────────────────────────────────────────

    async def get_prompt_template(self, db: AsyncSession, name: str) -> str | None:
        return await kv_ops.get(db, f"prompt:{name}")

    async def set_prompt_template(self, db: AsyncSession, name: str, template: str) -> None:
        await kv_ops.put(db, f"prompt:{name}", template)

    # ─────────────────────────────────────────────────────────────────────
    # Rate limiting
    # ─────────────────────────────────────────────────────────────────────

    async def check_rate_limit(
        self,
        db: AsyncSession,
        key: str,
        max_requests: int,
        window_seconds: int,
    ) -> bool:
        """
        Fixed-window request counter.

        Returns True and counts the request if under the limit, False otherwise.
        """
        kv_key = f"ratelimit:{key}"
        stored = await kv_ops.get(db, kv_key)
        now = time.time()
        current = json.loads(stored) if stored is not None else None

        if current is None or now > current["reset"]:
            window = {"count": 1, "reset": now + window_seconds}
            await kv_ops.put(db, kv_key, json.dumps(window), ttl_seconds=window_seconds)
            return True

        if current["count"] >= max_requests:
            return False

        current["count"] += 1
        await kv_ops.put(db, kv_key, json.dumps(current), ttl_seconds=window_seconds)
        return True

    # ─────────────────────────────────────────────────────────────────────
    # Source sync bookkeeping
    # ─────────────────────────────────────────────────────────────────────

    async def get_last_sync_time(self, db: AsyncSession, source: str) -> str | None:
        return await kv_ops.get(db, f"sync:{source}")

    async def set_last_sync_time(self, db: AsyncSession, source: str, timestamp: str) -> None:
        await kv_ops.put(db, f"sync:{source}", timestamp)


def clear_rules_cache() -> None:
    """Clear the in-process rules cache. Useful for testing."""
    _rules_cache.clear()


# Singleton instance
config_store = ConfigStore()
