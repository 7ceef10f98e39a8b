"""Configuration endpoint tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, patch

import pytest
from httpx import AsyncClient

from feedback_intel.core.exceptions import RuleConfigurationError
from feedback_intel.services.config_store import DEFAULT_SOURCE_CONFIGS


@pytest.fixture
def store(default_rules):
    with patch("feedback_intel.api.v1.config.config_store") as mock_store:
        mock_store.get_classification_rules = AsyncMock(return_value=default_rules)
        mock_store.update_classification_rules = AsyncMock(return_value=default_rules)
        mock_store.get_source_configs = AsyncMock(return_value=DEFAULT_SOURCE_CONFIGS)
        yield mock_store


@pytest.mark.asyncio
async def test_get_rules(api_client: AsyncClient, store):
    resp = await api_client.get("/api/config/rules")

    assert resp.status_code == 200
    rules = resp.json()
    assert rules["routing_rules"]["immediate_engineering"] == {"urgency_min": 4, "impact_min": 4}
    assert "security" in rules["urgency_keywords"]["critical"]


@pytest.mark.asyncio
async def test_update_rules(api_client: AsyncClient, store):
    update = {"urgency_keywords": {"critical": ["kernel panic"], "high": [], "low": []}}

    resp = await api_client.put("/api/config/rules", json=update)

    assert resp.status_code == 200
    assert resp.json() == {"success": True}
    assert store.update_classification_rules.call_args[0][1] == update


@pytest.mark.asyncio
async def test_update_rules_invalid(api_client: AsyncClient, store):
    """PUT /api/config/rules returns 400 for an incomplete configuration."""
    store.update_classification_rules.side_effect = RuleConfigurationError("missing trust_risk")

    resp = await api_client.put("/api/config/rules", json={"routing_rules": {}})

    assert resp.status_code == 400
    assert "missing trust_risk" in resp.json()["detail"]


@pytest.mark.asyncio
async def test_get_sources(api_client: AsyncClient, store):
    resp = await api_client.get("/api/config/sources")

    assert resp.status_code == 200
    assert [s["name"] for s in resp.json()] == [
        "github-issues",
        "discord-feedback",
        "support-tickets",
    ]
