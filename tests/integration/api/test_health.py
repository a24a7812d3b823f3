"""Tests for health check endpoints."""

import pytest
from httpx import AsyncClient


class TestHealthEndpoint:
    """Tests for the health check endpoint."""

    @pytest.mark.asyncio
    async def test_health_returns_200(self, client: AsyncClient) -> None:
        """Test that health endpoint returns 200 OK."""
        response = await client.get("/health")

        assert response.status_code == 200

    @pytest.mark.asyncio
    async def test_health_returns_correct_structure(self, client: AsyncClient) -> None:
        """Test that health endpoint returns expected structure."""
        response = await client.get("/health")
        data = response.json()

        assert "status" in data
        assert "version" in data
        assert "timestamp" in data
        assert "environment" in data

    @pytest.mark.asyncio
    async def test_health_status_is_healthy(self, client: AsyncClient) -> None:
        """Test that health status is 'healthy'."""
        response = await client.get("/health")
        data = response.json()

        assert data["status"] == "healthy"

    @pytest.mark.asyncio
    async def test_health_version_format(self, client: AsyncClient) -> None:
        """Test that version has expected format."""
        response = await client.get("/health")
        data = response.json()

        # Check version follows semver pattern
        assert data["version"] == "1.0.0"


class TestDetailedHealthEndpoint:
    """Tests for the readiness endpoint."""

    @pytest.mark.asyncio
    async def test_reports_database_and_guest_sessions(self, client: AsyncClient) -> None:
        await client.post("/api/v1/guest-sessions")

        response = await client.get("/health/detailed")
        data = response.json()

        assert response.status_code == 200
        assert data["database"] == "healthy"
        assert data["guest_sessions"] == 1
        assert data["cache"] is not None

    @pytest.mark.asyncio
    async def test_unwritable_cache_degrades(
        self, client: AsyncClient, tmp_path, monkeypatch
    ) -> None:
        from core.config import settings

        not_a_dir = tmp_path / "cache-file"
        not_a_dir.write_text("x")
        monkeypatch.setattr(settings, "cache_dir", str(not_a_dir))

        response = await client.get("/health/detailed")
        data = response.json()

        assert data["status"] == "degraded"
        assert data["cache"].startswith("unhealthy")
