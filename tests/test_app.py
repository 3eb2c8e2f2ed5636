"""
TIMEBOX API - Application Tests

Service info endpoints, startup configuration checks and lifespan wiring.
"""

import warnings
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient

from timebox.main import app
from timebox.config import settings
from timebox.database import Database
from timebox.security import validate_display_timezone, validate_security_config


class TestServiceInfo:
    """Tests for /health and /."""

    @pytest.fixture
    def client(self):
        return TestClient(app)

    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {
            "status": "healthy",
            "service": settings.APP_NAME,
            "version": settings.APP_VERSION,
        }

    def test_root(self, client):
        data = client.get("/").json()
        assert data["service"] == settings.APP_NAME
        assert data["version"] == settings.APP_VERSION


class TestSecurityConfig:
    """Startup warnings for insecure settings."""

    def test_defaults_are_quiet_in_development(self):
        with warnings.catch_warnings():
            warnings.simplefilter("error")
            validate_security_config()

    def test_default_secret_warns_in_production(self, monkeypatch):
        monkeypatch.setattr(settings, "ENVIRONMENT", "production")
        with pytest.warns(UserWarning, match="AUTH_JWT_SECRET"):
            validate_security_config()

    def test_cors_wildcard_warns(self, monkeypatch):
        monkeypatch.setattr(settings, "CORS_ORIGINS", ["*"])
        with pytest.warns(UserWarning, match="CORS"):
            validate_security_config()

    def test_unknown_display_timezone(self, monkeypatch):
        monkeypatch.setattr(settings, "DISPLAY_TIMEZONE", "Mars/Olympus_Mons")
        with pytest.raises(RuntimeError, match="DISPLAY_TIMEZONE"):
            validate_display_timezone()


class TestDatabaseLifecycle:
    """The database handle is opened and closed by the lifespan."""

    async def test_get_database_before_connect(self):
        with pytest.raises(RuntimeError):
            Database().get_database()

    @patch("timebox.database.AsyncIOMotorClient")
    async def test_connect_and_disconnect(self, mock_client_class):
        mock_client = MagicMock()
        mock_client_class.return_value = mock_client

        database = Database(uri="mongodb://example:27017", name="timebox_test")
        await database.connect()
        mock_client_class.assert_called_once_with("mongodb://example:27017", tz_aware=True)
        assert database.get_database() is mock_client.__getitem__.return_value

        await database.disconnect()
        mock_client.close.assert_called_once()
        assert database.db is None

    @patch("timebox.main.TaskRepository")
    @patch("timebox.main.Database")
    def test_lifespan_wires_database(self, mock_database_class, mock_repository_class):
        database = MagicMock()
        database.connect = AsyncMock()
        database.disconnect = AsyncMock()
        mock_database_class.return_value = database
        mock_repository_class.return_value.ensure_indexes = AsyncMock()

        with TestClient(app):
            assert app.state.database is database
            database.connect.assert_awaited_once()
            mock_repository_class.return_value.ensure_indexes.assert_awaited_once()

        database.disconnect.assert_awaited_once()
        assert app.state.database is None
