"""
Integration Tests for Health Check Endpoints

Tests the health check API endpoints.

Run with: pytest tests/integration/test_health.py -v
"""

from unittest.mock import patch

import pytest

from kanji_card.config import settings

pytestmark = pytest.mark.integration


class TestBasicHealthEndpoint:
    """Test the basic health check endpoint."""

    def test_health_returns_200(self, client) -> None:
        """Basic health check should return 200."""
        response = client.get("/api/health")

        assert response.status_code == 200

    def test_health_needs_no_user(self, client) -> None:
        """Health checks are not scoped to a user."""
        data = client.get("/api/health").json()

        assert data["status"] == "healthy"
        assert data["service"] == settings.APP_NAME


class TestDetailedHealthEndpoint:
    """Test the detailed health check endpoint."""

    def test_memory_backend_is_healthy(self, client) -> None:
        data = client.get("/api/health/detailed").json()

        assert data["status"] == "healthy"
        assert data["dependencies"]["storage"]["backend"] == "memory"

    def test_file_backend_reports_path(self, client, tmp_path) -> None:
        with patch.object(settings, "STORAGE_BACKEND", "file"), patch.object(
            settings, "DATA_DIR", str(tmp_path)
        ):
            data = client.get("/api/health/detailed").json()

        assert data["status"] == "healthy"
        assert data["dependencies"]["storage"]["path"] == str(tmp_path)

    def test_file_backend_data_dir_is_a_file(self, client, tmp_path) -> None:
        not_a_dir = tmp_path / "data"
        not_a_dir.write_text("oops")

        with patch.object(settings, "STORAGE_BACKEND", "file"), patch.object(
            settings, "DATA_DIR", str(not_a_dir)
        ):
            data = client.get("/api/health/detailed").json()

        assert data["status"] == "degraded"
        assert data["dependencies"]["storage"]["status"] == "unhealthy"
