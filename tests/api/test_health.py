"""
Test suite for the health endpoint and application wiring.

System role: Verification of health API and middleware registration
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.ext.asyncio import AsyncSession

from taskdesk.api.deps import get_health_service
from taskdesk.application.services.health_service import HealthService
from taskdesk.boundary.cache.history_cache import HistoryCache
from taskdesk.main import create_app
from taskdesk.models.health import AIHealthResponse


@pytest.fixture
def client() -> TestClient:
    """Provide TestClient for the full application (lifespan not started)."""
    return TestClient(create_app())


class TestHealthEndpoint:
    """Test suite for GET /api/ai/health."""

    def test_health_should_report_backends(self, client: TestClient) -> None:
        """Test the health payload and correlation header."""
        # Arrange
        service = MagicMock()
        service.check = AsyncMock(return_value=AIHealthResponse(ok=True, db=True, cache=False))
        client.app.dependency_overrides[get_health_service] = lambda: service

        # Act
        response = client.get("/api/ai/health")

        # Assert
        assert response.status_code == 200
        assert response.json() == {"ok": True, "db": True, "cache": False}
        assert response.headers.get("X-Correlation-ID")

    def test_correlation_id_should_be_echoed(self, client: TestClient) -> None:
        """Test a caller-supplied correlation id is returned."""
        service = MagicMock()
        service.check = AsyncMock(return_value=AIHealthResponse(ok=True, db=True, cache=True))
        client.app.dependency_overrides[get_health_service] = lambda: service

        response = client.get("/api/ai/health", headers={"X-Correlation-ID": "trace-1"})

        assert response.headers["X-Correlation-ID"] == "trace-1"


class TestHealthService:
    """Test suite for HealthService.check."""

    @pytest.mark.asyncio
    async def test_check_should_report_db_failure_without_raising(self) -> None:
        """Test a failing database ping is reported, not raised."""
        # Arrange
        db = AsyncMock(spec=AsyncSession)
        db.execute.side_effect = ConnectionError("down")
        service = HealthService(db=db, cache=HistoryCache(client=None))

        # Act
        result = await service.check()

        # Assert
        assert result == AIHealthResponse(ok=True, db=False, cache=False)

    @pytest.mark.asyncio
    async def test_check_should_report_healthy_backends(self, history_cache) -> None:
        """Test a working database and cache are reported up."""
        db = AsyncMock(spec=AsyncSession)
        query_result = MagicMock()
        query_result.scalar_one.return_value = 1
        db.execute.return_value = query_result
        service = HealthService(db=db, cache=history_cache)

        result = await service.check()

        assert result == AIHealthResponse(ok=True, db=True, cache=True)
