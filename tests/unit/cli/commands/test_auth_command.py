"""Tests for auth commands."""

from unittest.mock import patch

import pytest

from scuba_admin.cli import cli
from scuba_admin.models.auth import User
from scuba_admin.services.errors import AuthenticationError


@pytest.fixture
def auth_service():
    with patch("scuba_admin.cli.commands.auth.AuthService") as service_cls:
        yield service_cls.return_value


USER = User(id=3, full_name="Mara Lopes", email="mara@example.com", role="admin", dive_center_id=1)


class TestLogin:
    def test_uses_configured_credentials(self, runner, cli_obj, auth_service):
        auth_service.login.return_value = USER

        result = runner.invoke(cli, ["auth", "login"], obj=cli_obj)

        assert result.exit_code == 0
        assert "Logging in to http://api.test" in result.output
        assert "Logged in as Mara Lopes" in result.output
        auth_service.login.assert_called_once_with("staff@divecenter.test", "secret-password")

    def test_options_override_config(self, runner, cli_obj, auth_service):
        auth_service.login.return_value = USER

        runner.invoke(
            cli, ["auth", "login", "--email", "other@example.com", "--password", "pw"], obj=cli_obj
        )

        auth_service.login.assert_called_once_with("other@example.com", "pw")

    def test_prompts_without_password(self, runner, cli_obj, auth_service, monkeypatch):
        monkeypatch.setattr(cli_obj.config, "api_password", None)
        auth_service.login.return_value = USER

        result = runner.invoke(cli, ["auth", "login"], obj=cli_obj, input="typed-secret\n")

        assert result.exit_code == 0
        auth_service.login.assert_called_once_with("staff@divecenter.test", "typed-secret")

    def test_bad_credentials(self, runner, cli_obj, auth_service):
        auth_service.login.side_effect = AuthenticationError(
            "These credentials do not match our records.", 401
        )

        result = runner.invoke(cli, ["auth", "login"], obj=cli_obj)

        assert result.exit_code == 5
        assert "Authentication Failed" in result.output


def test_logout(runner, cli_obj, auth_service):
    result = runner.invoke(cli, ["auth", "logout"], obj=cli_obj)
    assert result.exit_code == 0
    assert "Logged out" in result.output
    auth_service.logout.assert_called_once()


class TestWhoami:
    def test_online(self, runner, cli_obj, auth_service):
        auth_service.current_user.return_value = USER
        result = runner.invoke(cli, ["auth", "whoami"], obj=cli_obj)
        assert result.exit_code == 0
        assert "mara@example.com" in result.output
        auth_service.saved_user.assert_not_called()

    def test_offline_without_session(self, runner, cli_obj, auth_service):
        auth_service.saved_user.return_value = None
        result = runner.invoke(cli, ["auth", "whoami", "--offline"], obj=cli_obj)
        assert result.exit_code == 0
        assert "No saved session" in result.output
        auth_service.current_user.assert_not_called()
