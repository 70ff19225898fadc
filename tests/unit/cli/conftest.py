"""Fixtures for CLI tests."""

import pytest
from click.testing import CliRunner

from scuba_admin.cli.context import CliContext


@pytest.fixture(autouse=True)
def quiet_logging(monkeypatch):
    """Keep the CLI from attaching console handlers to the runner's streams."""
    monkeypatch.setenv("LOG_CONSOLE", "false")


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def cli_obj(mock_client, test_config):
    """CLI state with a mocked API client."""
    return CliContext(config=test_config, client=mock_client)
