"""Shared fixtures for the test suite."""

import pytest
from unittest.mock import MagicMock
from fastapi.testclient import TestClient

from database import DatabaseManager
from api.data_access import RecordDataProvider
from api.main import create_app
from api.redirect import create_redirect_app


@pytest.fixture
def db_path(tmp_path):
    """Path to a not-yet-created SQLite file in tmp_path."""
    return str(tmp_path / "data.db")


@pytest.fixture
def tmp_db(db_path):
    """Fresh seeded DatabaseManager backed by a real SQLite DB in tmp_path."""
    db = DatabaseManager(db_path=db_path)
    yield db
    db.close()


@pytest.fixture
def provider(tmp_db):
    """Read-only provider over the seeded tmp database."""
    data = RecordDataProvider(tmp_db.db_path)
    yield data
    data.close()


@pytest.fixture
def client(provider):
    """TestClient for the secure-listener app over a real seeded database."""
    with TestClient(create_app(provider)) as c:
        yield c


@pytest.fixture
def mock_client():
    """Factory: TestClient whose provider is a MagicMock (returned alongside)."""
    def _make():
        data = MagicMock(spec=RecordDataProvider)
        return TestClient(create_app(data)), data
    return _make


@pytest.fixture
def redirect_client():
    """TestClient for the plaintext redirect app, as if reached on :8080."""
    with TestClient(
        create_redirect_app(8443),
        base_url="http://example.com:8080",
        follow_redirects=False,
    ) as c:
        yield c
