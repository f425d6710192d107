"""
Tests for health check endpoint.
"""
import pytest
from httpx import ASGITransport, AsyncClient

from src.config import Settings
from src.main import create_app


@pytest.fixture
def app():
    return create_app(Settings(supported_locales="en"))


@pytest.mark.asyncio
async def test_health_endpoint(app):
    """Test the health check endpoint returns expected response."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/api/health")

    assert response.status_code == 200
    data = response.json()
    assert data["status"] == "healthy"
    assert "timestamp" in data
    assert data["version"] == "0.1.0"


@pytest.mark.asyncio
async def test_root_endpoint(app):
    """Test the root endpoint serves the default language."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as client:
        response = await client.get("/")

    assert response.status_code == 200
    data = response.json()
    assert data["language"] == "en"
    assert data["detected_locale"] == "en"
