"""Ingestion and seed endpoint tests."""

from __future__ import annotations

import pytest
from httpx import AsyncClient


@pytest.mark.asyncio
async def test_ingest_single_item(api_client: AsyncClient, mock_db):
    """POST /api/ingest accepts one object."""
    resp = await api_client.post(
        "/api/ingest",
        json={"id": "gh-1", "source": "github", "title": "T", "content": "C"},
    )
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "ingested": 1}
    assert mock_db.merge.await_count == 1


@pytest.mark.asyncio
async def test_ingest_list(api_client: AsyncClient, mock_db):
    """POST /api/ingest accepts a list."""
    resp = await api_client.post(
        "/api/ingest",
        json=[
            {"id": "gh-1", "source": "github", "title": "T", "content": "C"},
            {
                "id": "zd-7",
                "source": "zendesk",
                "title": "T2",
                "content": "C2",
                "label": "billing",
                "raw_metadata": {"ticket": 7},
            },
        ],
    )
    assert resp.status_code == 200
    assert resp.json()["ingested"] == 2
    assert mock_db.merge.await_count == 2


@pytest.mark.asyncio
async def test_ingest_rejects_missing_fields(api_client: AsyncClient):
    """POST /api/ingest returns 422 without required fields."""
    resp = await api_client.post("/api/ingest", json={"id": "gh-1", "source": "github"})
    assert resp.status_code == 422


@pytest.mark.asyncio
async def test_seed(api_client: AsyncClient, mock_db):
    """POST /api/seed ingests the sample cloudflared issues."""
    resp = await api_client.post("/api/seed")
    assert resp.status_code == 200
    assert resp.json() == {"success": True, "seeded": 9}
    ids = [call.args[0].id for call in mock_db.merge.call_args_list]
    assert ids[0] == "gh-001" and ids[-1] == "gh-009"
