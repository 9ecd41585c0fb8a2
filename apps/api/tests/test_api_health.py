"""Tests for health endpoints."""

import pytest
from httpx import AsyncClient


class TestHealth:
    @pytest.mark.asyncio
    async def test_health(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/health")
        assert response.json() == {"status": "ok"}

    @pytest.mark.asyncio
    async def test_ready(self, client: AsyncClient) -> None:
        response = await client.get("/api/v1/health/ready")
        assert response.status_code == 200
        assert response.json() == {"status": "ready"}
