"""
Integration test fixtures for LifeOS.

Provides fixtures specific to integration testing:
- FastAPI test client with isolated databases and blob directory
- Authenticated request headers backed by a real session
"""

import os
import tempfile
from collections.abc import Generator
from pathlib import Path
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient


TEST_SECURITY_CONFIG = {
    "require_auth": True,
    "session_cookie_name": "lifeos_session",
}


# ─────────────────────────────────────────────────────────────────────────────
# Dashboard API Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture
def temp_session_db() -> Generator[Path, None, None]:
    """Create a temporary session database for testing."""
    with tempfile.NamedTemporaryFile(suffix=".db", delete=False) as f:
        db_path = Path(f.name)

    yield db_path

    if db_path.exists():
        os.unlink(db_path)


@pytest.fixture
def dashboard_app(temp_db, temp_session_db, temp_blob_dir):
    """FastAPI app with every storage path patched to temporary locations."""
    with (
        patch("lifeos.database.DB_PATH", temp_db),
        patch("lifeos.security.session.DB_PATH", temp_session_db),
        patch("lifeos.vault.storage.BLOB_DIR", temp_blob_dir),
    ):
        from lifeos.dashboard.backend.dependencies import get_security_config
        from lifeos.dashboard.backend.main import app

        app.dependency_overrides[get_security_config] = lambda: TEST_SECURITY_CONFIG

        yield app

        app.dependency_overrides.clear()


@pytest.fixture
def test_client(dashboard_app) -> Generator[TestClient, None, None]:
    """Create a test client for the dashboard API."""
    with TestClient(dashboard_app) as client:
        yield client


@pytest.fixture
def auth_headers(dashboard_app, mock_user_id) -> dict:
    """Bearer header for a fresh session belonging to the standard test user."""
    from lifeos.security.session import create_session

    token = create_session(mock_user_id)["token"]
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_auth_headers(dashboard_app, other_user_id) -> dict:
    from lifeos.security.session import create_session

    token = create_session(other_user_id)["token"]
    return {"Authorization": f"Bearer {token}"}
