"""Tests for health check and metrics endpoints."""

from contextlib import asynccontextmanager
from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from src.utils.metrics import Histogram, metrics


@pytest.fixture
def healthy_database(db_session: AsyncSession, monkeypatch: pytest.MonkeyPatch) -> None:
    """Point the health check at the test database."""

    @asynccontextmanager
    async def session():
        yield db_session

    monkeypatch.setattr("src.main.async_session_maker", session)


class TestHealthCheck:
    """Tests for /health endpoint."""

    @pytest.mark.asyncio
    async def test_health_response_structure(self, client: AsyncClient, healthy_database, monkeypatch):
        """Test health response has correct structure."""
        monkeypatch.setattr("src.main.cache.ping", AsyncMock(return_value=True))

        response = await client.get("/health")
        data = response.json()

        assert response.status_code == 200
        assert data["status"] == "healthy"
        assert "timestamp" in data
        assert "uptime_seconds" in data
        assert "version" in data
        assert data["checks"]["database"] == {"status": "healthy"}
        assert data["checks"]["redis"] == {"status": "healthy"}

    @pytest.mark.asyncio
    async def test_redis_down_is_not_degraded(self, client: AsyncClient, healthy_database, monkeypatch):
        """Test that the optional cache does not degrade health."""
        monkeypatch.setattr("src.main.cache.ping", AsyncMock(side_effect=ConnectionError("refused")))

        response = await client.get("/health")

        assert response.status_code == 200
        assert response.json()["checks"]["redis"] == {"status": "unavailable"}

    @pytest.mark.asyncio
    async def test_database_down_is_degraded(self, client: AsyncClient, monkeypatch):
        """Test that a database failure returns 503."""

        def broken_session():
            raise ConnectionError("database unreachable")

        monkeypatch.setattr("src.main.async_session_maker", broken_session)
        monkeypatch.setattr("src.main.cache.ping", AsyncMock(return_value=True))

        response = await client.get("/health")

        assert response.status_code == 503
        assert response.json()["status"] == "degraded"


class TestMetrics:
    """Tests for /metrics endpoint."""

    @pytest.mark.asyncio
    async def test_prometheus_format(self, client: AsyncClient):
        """Test that metrics are exposed as text with recommendation counters."""
        metrics.recommendation_tier_failures_total.inc(tier="popular_remote")

        response = await client.get("/metrics")

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/plain")
        assert 'recommendation_tier_failures_total{tier="popular_remote"}' in response.text

    @pytest.mark.asyncio
    async def test_paths_normalized(self, client: AsyncClient):
        """Test that content ids are collapsed in request metrics."""
        await client.get("/api/content/movie_603/related")

        assert "/api/content/:id/related" in metrics.format_prometheus()

    def test_histogram_buckets_cumulative(self):
        """Test that bucket lines are cumulative and end with the total count."""
        histogram = Histogram(name="h", help="test", labels=("strategy",), buckets=(0.1, 1.0))
        histogram.observe(0.05, strategy="a")
        histogram.observe(0.5, strategy="a")

        lines = histogram.render()

        assert 'h_bucket{strategy="a",le="0.1"} 1' in lines
        assert 'h_bucket{strategy="a",le="1.0"} 2' in lines
        assert 'h_bucket{strategy="a",le="+Inf"} 2' in lines
        assert 'h_count{strategy="a"} 2' in lines
