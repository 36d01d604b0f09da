"""Health check endpoint tests."""

import pytest
from httpx import AsyncClient

from flowcheck import __version__


@pytest.mark.asyncio
async def test_health_check(async_client: AsyncClient) -> None:
    """Test health check endpoint returns healthy status."""
    response = await async_client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


@pytest.mark.asyncio
async def test_root_endpoint(async_client: AsyncClient) -> None:
    """Test root endpoint returns API info."""
    response = await async_client.get("/")
    assert response.status_code == 200
    data = response.json()
    assert data["version"] == __version__
    assert data["docs"] == "/docs"
    assert "name" in data


@pytest.mark.asyncio
async def test_api_v1_status(async_client: AsyncClient) -> None:
    """Test API v1 status endpoint."""
    response = await async_client.get("/api/v1/status")
    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "ok"
    assert data["version"] == "v1"


@pytest.mark.asyncio
async def test_openapi_lists_validation_routes(async_client: AsyncClient) -> None:
    """Test the OpenAPI document is served under the v1 prefix."""
    response = await async_client.get("/api/v1/openapi.json")
    assert response.status_code == 200
    paths = response.json()["paths"]
    assert "/api/v1/validation/workflows" in paths
    assert "/api/v1/validation/workflows/quick" in paths
    assert "/api/v1/validation/workflows/summary" in paths
