"""Unit tests for the main FastAPI application."""
from unittest.mock import patch

from fastapi.testclient import TestClient

from outline_api.main import app

# Test client
client = TestClient(app)


class TestHealthCheck:
    """Test cases for health check endpoint."""

    def test_health_check_success(self):
        response = client.get("/")

        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "healthy"
        assert data["version"] == "1.0.0"
        assert "timestamp" in data


class TestLifecycle:
    """Startup opens the pool with configured bounds and loads book metadata."""

    @patch("outline_api.main.close_connection_pool")
    @patch("outline_api.main.get_bible_metadata")
    @patch("outline_api.main.initialize_connection_pool")
    def test_startup_and_shutdown(self, mock_init_pool, mock_metadata, mock_close_pool):
        with TestClient(app) as lifecycle_client:
            lifecycle_client.get("/")

        mock_init_pool.assert_called_once_with(minconn=2, maxconn=20)
        mock_metadata.assert_called_once()
        mock_close_pool.assert_called_once()
