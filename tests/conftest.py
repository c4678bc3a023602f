"""Shared pytest fixtures for all tests."""

import pytest
from fastapi.testclient import TestClient

from components.core.config import Settings
from components.listing.state import MemoryStateStorage
from restapi.router import create_app


@pytest.fixture(params=["orm", "sql"])
def backend(request):
    """Every API test runs once per store adapter."""
    return request.param


@pytest.fixture
def test_settings(tmp_path, backend):
    """Create settings pointing to a temporary SQLite database.

    Args:
        tmp_path: pytest tmp_path fixture for temporary directory.
        backend: Store adapter under test.

    Returns:
        Settings: Test configuration object.
    """
    return Settings(
        DB_URL=f"sqlite+aiosqlite:///{tmp_path / 'test.db'}",
        DB_BACKEND=backend,
        LOG_LEVEL="DEBUG",
        DEFAULT_PAGE_SIZE=10,
        LIST_STATE_DIR=None,
    )


@pytest.fixture
def client(test_settings):
    """Create a TestClient whose lifespan has created the schema.

    Yields:
        TestClient: Client bound to a fresh application.
    """
    app = create_app(test_settings)
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def state_storage():
    return MemoryStateStorage()
