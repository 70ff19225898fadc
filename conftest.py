"""
Global pytest configuration and fixtures.
"""
import os
from typing import Dict
from unittest.mock import Mock

import pytest

from scuba_admin.config import ScubaAdminConfig, reload_config
from scuba_admin.services.api_client import ApiClient


@pytest.fixture(scope="session")
def test_env_vars() -> Dict[str, str]:
    """Test environment variables for configuration."""
    return {
        "API_BASE_URL": "http://api.test",
        "API_EMAIL": "staff@divecenter.test",
        "API_PASSWORD": "secret-password",
        "ENVIRONMENT": "testing",
        "DEBUG": "true",
        "LOG_LEVEL": "DEBUG",
        "DEFAULT_PER_PAGE": "20",
        "BULK_CONCURRENCY": "2",
    }


@pytest.fixture(autouse=True)
def mock_env(test_env_vars, monkeypatch, tmp_path):
    """Mock environment variables for testing."""
    for key, value in test_env_vars.items():
        monkeypatch.setenv(key, value)
    monkeypatch.setenv("SESSION_FILE", str(tmp_path / "session.json"))

    # Clear the global config to force reload with test values
    import scuba_admin.config.settings

    scuba_admin.config.settings._config = None

    yield test_env_vars

    # Clean up
    scuba_admin.config.settings._config = None


@pytest.fixture
def test_config(mock_env) -> ScubaAdminConfig:
    """Test configuration instance."""
    return reload_config()


@pytest.fixture
def mock_client():
    """ApiClient double; services only ever call its request helpers."""
    client = Mock(spec=ApiClient)
    client.base_url = "http://api.test"
    return client


@pytest.fixture
def customer_payload():
    """A customer as the API returns it."""
    return {
        "id": 7,
        "dive_center_id": 1,
        "full_name": "Ana Reef",
        "email": "ana@example.com",
        "phone": "+960 555 0101",
        "country": "Portugal",
        "date_of_birth": "1990-04-12T00:00:00.000000Z",
        "agent_id": None,
        "created_at": "2024-01-02T10:00:00.000000Z",
    }


@pytest.fixture
def paginated():
    """Wrap records in the Laravel paginator shape."""

    def _wrap(records, current_page=1, last_page=1, total=None):
        return {
            "data": records,
            "current_page": current_page,
            "last_page": last_page,
            "per_page": 20,
            "total": len(records) if total is None else total,
        }

    return _wrap


@pytest.fixture(autouse=True)
def cleanup_test_files():
    """Clean up any test files created during testing."""
    yield

    # Remove test coverage files in case they're created
    test_files = ["coverage.xml", ".coverage"]
    for file in test_files:
        if os.path.exists(file):
            os.remove(file)


def pytest_configure(config):
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line("markers", "unit: mark test as a unit test")
    config.addinivalue_line("markers", "integration: mark test as an integration test")
    config.addinivalue_line("markers", "slow: mark test as slow running")


def pytest_collection_modifyitems(config, items):
    """Modify test collection to add markers based on location."""
    for item in items:
        # Add unit marker for tests in tests/unit/
        if "tests/unit/" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
