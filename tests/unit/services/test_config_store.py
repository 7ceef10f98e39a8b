"""Unit tests for ConfigStore: kv_ops mocked."""

import json
from unittest.mock import AsyncMock, patch

import pytest

from feedback_intel.config import settings
from feedback_intel.core.exceptions import RuleConfigurationError
from feedback_intel.services import config_store as config_store_module
from feedback_intel.services.config_store import (
    DEFAULT_CLASSIFICATION_RULES,
    DEFAULT_SOURCE_CONFIGS,
    ConfigStore,
)


@pytest.fixture
def kv():
    with patch("feedback_intel.services.config_store.kv_ops") as mock_kv:
        mock_kv.get = AsyncMock(return_value=None)
        mock_kv.put = AsyncMock()
        mock_kv.delete = AsyncMock()
        yield mock_kv


class TestClassificationRules:
    def setup_method(self):
        self.store = ConfigStore()
        self.db = AsyncMock()

    async def test_defaults_written_back_with_ttl(self, kv):
        rules = await self.store.get_classification_rules(self.db)

        assert rules.routing_rules.immediate_engineering.urgency_min == 4
        assert rules.routing_rules.trust_risk.sentiment_max == -1
        key, value = kv.put.call_args[0][1:3]
        assert key == "classification_rules"
        assert json.loads(value) == DEFAULT_CLASSIFICATION_RULES
        assert kv.put.call_args.kwargs["ttl_seconds"] == 86400

    async def test_stored_rules_are_used(self, kv):
        stored = json.loads(json.dumps(DEFAULT_CLASSIFICATION_RULES))
        stored["routing_rules"]["immediate_engineering"]["urgency_min"] = 5
        kv.get.return_value = json.dumps(stored)

        rules = await self.store.get_classification_rules(self.db)

        assert rules.routing_rules.immediate_engineering.urgency_min == 5
        kv.put.assert_not_awaited()

    async def test_rules_cached_in_process(self, kv):
        kv.get.return_value = json.dumps(DEFAULT_CLASSIFICATION_RULES)

        first = await self.store.get_classification_rules(self.db)
        second = await self.store.get_classification_rules(self.db)

        assert first is second
        assert kv.get.await_count == 1

    def test_rules_cache_lifetime_comes_from_settings(self):
        assert config_store_module._rules_cache.ttl == settings.rules_memory_cache_ttl_seconds

    async def test_incomplete_stored_rules_raise(self, kv):
        kv.get.return_value = json.dumps({"routing_rules": {}})

        with pytest.raises(RuleConfigurationError):
            await self.store.get_classification_rules(self.db)

    async def test_update_merges_top_level_sections(self, kv):
        kv.get.return_value = json.dumps(DEFAULT_CLASSIFICATION_RULES)
        new_keywords = {"critical": ["kernel panic"], "high": [], "low": []}

        rules = await self.store.update_classification_rules(
            self.db, {"urgency_keywords": new_keywords}
        )

        assert rules.urgency_keywords.critical == ["kernel panic"]
        assert rules.routing_rules.immediate_engineering.urgency_min == 4
        stored = json.loads(kv.put.call_args[0][2])
        assert stored["urgency_keywords"]["critical"] == ["kernel panic"]
        assert "ttl_seconds" not in kv.put.call_args.kwargs

    async def test_update_replaces_section_wholesale(self, kv):
        kv.get.return_value = json.dumps(DEFAULT_CLASSIFICATION_RULES)

        with pytest.raises(RuleConfigurationError):
            await self.store.update_classification_rules(
                self.db,
                {"routing_rules": {"immediate_engineering": {"urgency_min": 5, "impact_min": 5}}},
            )
        kv.put.assert_not_awaited()

    async def test_update_invalidates_cache(self, kv):
        kv.get.return_value = json.dumps(DEFAULT_CLASSIFICATION_RULES)
        await self.store.get_classification_rules(self.db)

        updated = json.loads(json.dumps(DEFAULT_CLASSIFICATION_RULES))
        updated["routing_rules"]["trust_risk"]["impact_min"] = 4
        await self.store.update_classification_rules(
            self.db, {"routing_rules": updated["routing_rules"]}
        )
        kv.get.return_value = json.dumps(updated)

        rules = await self.store.get_classification_rules(self.db)
        assert rules.routing_rules.trust_risk.impact_min == 4


class TestSourceConfigs:
    def setup_method(self):
        self.store = ConfigStore()
        self.db = AsyncMock()

    async def test_defaults(self, kv):
        configs = await self.store.get_source_configs(self.db)

        assert configs == DEFAULT_SOURCE_CONFIGS
        enabled = [c["name"] for c in configs if c["enabled"]]
        assert enabled == ["github-issues"]
        kv.put.assert_awaited_once()

    async def test_stored(self, kv):
        kv.get.return_value = json.dumps([{"name": "discord-feedback", "enabled": True}])

        configs = await self.store.get_source_configs(self.db)

        assert configs == [{"name": "discord-feedback", "enabled": True}]


class TestClassificationCache:
    def setup_method(self):
        self.store = ConfigStore()
        self.db = AsyncMock()

    async def test_cache_uses_default_ttl(self, kv):
        await self.store.cache_classification(self.db, "gh-1", {"urgency": 4})

        args = kv.put.call_args
        assert args[0][1] == "classification:gh-1"
        assert json.loads(args[0][2]) == {"urgency": 4}
        assert args.kwargs["ttl_seconds"] == 300

    async def test_get_cached(self, kv):
        kv.get.return_value = json.dumps({"urgency": 4})

        assert await self.store.get_cached_classification(self.db, "gh-1") == {"urgency": 4}
        kv.get.assert_awaited_with(self.db, "classification:gh-1")

    async def test_get_cached_miss(self, kv):
        assert await self.store.get_cached_classification(self.db, "gh-1") is None

    async def test_clear(self, kv):
        await self.store.clear_classification_cache(self.db, "gh-1")
        kv.delete.assert_awaited_once_with(self.db, "classification:gh-1")


class TestRateLimit:
    def setup_method(self):
        self.store = ConfigStore()
        self.db = AsyncMock()

    async def test_first_request_opens_window(self, kv):
        with patch("feedback_intel.services.config_store.time.time", return_value=1000.0):
            assert await self.store.check_rate_limit(self.db, "summary", 2, 60) is True

        window = json.loads(kv.put.call_args[0][2])
        assert window == {"count": 1, "reset": 1060.0}

    async def test_counts_within_window(self, kv):
        kv.get.return_value = json.dumps({"count": 1, "reset": 1060.0})

        with patch("feedback_intel.services.config_store.time.time", return_value=1010.0):
            assert await self.store.check_rate_limit(self.db, "summary", 2, 60) is True

        assert json.loads(kv.put.call_args[0][2])["count"] == 2

    async def test_rejects_when_exhausted(self, kv):
        kv.get.return_value = json.dumps({"count": 2, "reset": 1060.0})

        with patch("feedback_intel.services.config_store.time.time", return_value=1010.0):
            assert await self.store.check_rate_limit(self.db, "summary", 2, 60) is False

        kv.put.assert_not_awaited()

    async def test_resets_after_window(self, kv):
        kv.get.return_value = json.dumps({"count": 2, "reset": 1060.0})

        with patch("feedback_intel.services.config_store.time.time", return_value=1061.0):
            assert await self.store.check_rate_limit(self.db, "summary", 2, 60) is True


class TestPromptTemplatesAndSync:
    def setup_method(self):
        self.store = ConfigStore()
        self.db = AsyncMock()

    async def test_prompt_template_round_trip_keys(self, kv):
        await self.store.set_prompt_template(self.db, "classify", "Classify: {content}")
        kv.put.assert_awaited_once_with(self.db, "prompt:classify", "Classify: {content}")

        kv.get.return_value = "Classify: {content}"
        assert await self.store.get_prompt_template(self.db, "classify") == "Classify: {content}"

    async def test_last_sync_time(self, kv):
        await self.store.set_last_sync_time(self.db, "github", "2026-01-01T00:00:00Z")
        kv.put.assert_awaited_once_with(self.db, "sync:github", "2026-01-01T00:00:00Z")
