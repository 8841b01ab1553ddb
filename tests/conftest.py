"""Shared fixtures.

Every test gets its own SQLite file and bucket root under tmp_path, and the
process-wide client, session registry and config cache are reset around it.
"""

import pytest
from fastapi.testclient import TestClient

from socialhub.auth.session import SessionHolder
from socialhub.config.app_config import clear_config_cache
from socialhub.db.client import DataClient, configure_client, reset_client
from socialhub.web.sessions import reset_session_registry

PASSWORD = "secret123"


def sign_up(client: DataClient, email: str, username: str, full_name: str | None = None) -> SessionHolder:
    """Register a user and return their signed-in session."""
    session = SessionHolder(client)
    session.sign_up(email, PASSWORD, username, full_name)
    return session


@pytest.fixture
def data_client(tmp_path, monkeypatch) -> DataClient:
    """Isolated data client installed as the shared instance."""
    monkeypatch.chdir(tmp_path)
    clear_config_cache()
    reset_client()
    reset_session_registry()

    client = configure_client(
        db_path=tmp_path / "db" / "test.db",
        storage_root=tmp_path / "storage",
        public_url="http://testserver",
        buckets=["avatars", "drawings", "videos", "books", "chat"],
    )
    yield client

    reset_client()
    reset_session_registry()
    clear_config_cache()


@pytest.fixture
def session(data_client) -> SessionHolder:
    """Signed-in session for Ana."""
    return sign_up(data_client, "ana@example.com", "ana", "Ana García")


@pytest.fixture
def other_session(data_client) -> SessionHolder:
    """Signed-in session for a second user, Ben."""
    return sign_up(data_client, "ben@example.com", "ben", "Ben Ortiz")


@pytest.fixture
def api(data_client) -> TestClient:
    """Test client over a fresh app bound to the isolated data client."""
    from socialhub.web.api import create_app

    return TestClient(create_app())


def _auth_headers(api: TestClient, email: str, username: str) -> dict[str, str]:
    response = api.post(
        "/api/auth/signup",
        json={"email": email, "password": PASSWORD, "username": username},
    )
    assert response.status_code == 201, response.text
    return {"Authorization": f"Bearer {response.json()['token']}"}


@pytest.fixture
def auth_headers(api) -> dict[str, str]:
    """Bearer header for a user signed up through the API."""
    return _auth_headers(api, "ana@example.com", "ana")


@pytest.fixture
def other_headers(api) -> dict[str, str]:
    return _auth_headers(api, "ben@example.com", "ben")
