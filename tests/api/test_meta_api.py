"""Health and self-description endpoint tests."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
@pytest.mark.parametrize("path", ["/health", "/api/health"])
async def test_health(api_client: AsyncClient, path: str):
    resp = await api_client.get(path)
    assert resp.status_code == 200
    data = resp.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data


@pytest.mark.asyncio
async def test_describe_api(api_client: AsyncClient):
    resp = await api_client.get("/api")
    assert resp.status_code == 200
    data = resp.json()
    assert data["name"] == "Feedback Intelligence Agent"
    assert "POST /api/classify" in data["endpoints"]
    assert data["classification_framework"]["sentiment"] == "-2 (Frustrated) to +2 (Enthusiastic)"
