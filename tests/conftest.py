"""Shared fixtures and utilities for tests."""

import os

# Settings are read at import time, so the test environment has to be in
# place before anything from the application is imported.
os.environ["APP_ENV"] = "test"
os.environ["SIMULATION_ENABLED"] = "false"
os.environ["JSON_LOGS"] = "false"
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("LOG_LEVEL", "WARNING")

import pytest
import pytest_asyncio
from fastapi.testclient import TestClient

from api.main import app
from api.dependencies import get_job_chooser
from database.store import EntityStore, get_store

TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"


@pytest_asyncio.fixture
async def db_store():
    """Empty store on a private in-memory database, for service tests."""
    store = EntityStore.from_url(TEST_DATABASE_URL)
    await store.create_all()
    yield store
    await store.dispose()


@pytest.fixture
def store():
    """Store for API tests; tables are created on the client's event loop."""
    return EntityStore.from_url(TEST_DATABASE_URL)


@pytest.fixture
def client(store):
    """Test client bound to an empty store. Jobless candidates get the first job."""
    app.dependency_overrides[get_store] = lambda: store
    app.dependency_overrides[get_job_chooser] = lambda: (lambda job_ids: job_ids[0])
    with TestClient(app, raise_server_exceptions=False) as test_client:
        test_client.portal.call(store.create_all)
        yield test_client
        test_client.portal.call(store.dispose)
    app.dependency_overrides.clear()


@pytest.fixture
def make_job(client):
    """Factory creating a job through the API and returning its JSON."""

    def create_job(title: str, tags=None) -> dict:
        response = client.post("/jobs", json={"title": title, "tags": tags or []})
        assert response.status_code == 201, response.text
        return response.json()

    return create_job


@pytest.fixture
def make_candidate(client):
    """Factory creating a candidate through the API and returning its JSON."""

    def create_candidate(job_id: int, name: str = "Ada Lovelace",
                         email: str = "ada@example.com", stage=None) -> dict:
        payload = {"name": name, "email": email, "jobId": job_id}
        if stage is not None:
            payload["stage"] = stage
        response = client.post("/candidates", json=payload)
        assert response.status_code == 201, response.text
        return response.json()

    return create_candidate
