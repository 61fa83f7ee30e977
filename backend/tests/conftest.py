"""
Shared test fixtures and configuration.
"""

import pytest
import os

# Set test environment variables before importing app modules
os.environ.setdefault("SECRET_KEY", "test-secret-key-for-testing")
os.environ.setdefault("DEBUG", "true")
os.environ.setdefault("LOCAL_STORAGE_PATH", "/tmp/fittrack_test_data")
os.environ.setdefault("LOG_FILE_ENABLED", "false")

from fastapi.testclient import TestClient

from fittrack.config import Settings
from fittrack.main import create_app
from fittrack.storage import LocalStorage

TEST_EMAIL = "alex@example.com"
TEST_PASSWORD = "s3cret-pass"


@pytest.fixture
def settings(tmp_path):
    """Settings pointing at a throwaway data directory, with no log files."""
    return Settings(
        secret_key="test-secret-key-for-testing",
        local_storage_path=str(tmp_path / "data"),
        log_file_enabled=False,
        log_console_enabled=False,
        log_level="DEBUG",
    )


@pytest.fixture
def store(tmp_path):
    return LocalStorage(str(tmp_path / "store"))


@pytest.fixture
def client(settings):
    # Entering the context runs the lifespan, which builds the services on app.state
    with TestClient(create_app(settings)) as test_client:
        yield test_client


@pytest.fixture
def register(client):
    """Return a helper that signs up an account and returns its auth headers."""
    def _register(email=TEST_EMAIL, password=TEST_PASSWORD, **profile):
        body = {"email": email, "password": password, "name": "Alex", **profile}
        response = client.post("/signup", json=body)
        assert response.status_code == 201, response.text

        response = client.post("/login", json={"email": email, "password": password})
        assert response.status_code == 200, response.text
        return {"Authorization": f"Bearer {response.json()['access_token']}"}

    return _register


@pytest.fixture
def auth_headers(register):
    """Sign up a test user with a full profile and return its auth headers."""
    return register(
        gender="female",
        age=30,
        height=170,
        weight=70,
        goal="lose",
        activityLevel="moderate",
        dietPreference="none",
    )
