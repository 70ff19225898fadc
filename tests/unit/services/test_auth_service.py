"""Tests for AuthService."""

from unittest.mock import Mock

import pytest
from pydantic import ValidationError

from scuba_admin.services.auth_service import AuthService
from scuba_admin.services.errors import AuthenticationError, ServerError


@pytest.fixture
def client(mock_client):
    mock_client.session = Mock()
    mock_client.session_store = Mock()
    return mock_client


class TestLogin:
    """Test login flow."""

    def test_login_fetches_csrf_and_saves_session(self, client):
        client.post.return_value = {"user": {"id": 1, "full_name": "Kai Staff", "role": "admin"}}

        user = AuthService(client).login("kai@example.com", "secret")

        client.refresh_csrf_token.assert_called_once()
        client.post.assert_called_once_with(
            "/login", json={"email": "kai@example.com", "password": "secret"}
        )
        client.session_store.save_cookies.assert_called_once()
        args, kwargs = client.session_store.save_cookies.call_args
        assert args[0] == "http://api.test"
        assert kwargs["user"]["full_name"] == "Kai Staff"
        assert user.display_name == "Kai Staff"

    def test_login_without_store(self, client):
        client.session_store = None
        client.post.return_value = {"id": 1, "email": "kai@example.com"}
        assert AuthService(client).login("kai@example.com", "secret").display_name == "kai@example.com"

    def test_malformed_email(self, client):
        with pytest.raises(ValidationError):
            AuthService(client).login("kai", "secret")
        client.post.assert_not_called()

    def test_empty_password(self, client):
        with pytest.raises(ValidationError, match="Password is required"):
            AuthService(client).login("kai@example.com", "")

    def test_rejected_credentials(self, client):
        client.post.side_effect = AuthenticationError("These credentials do not match our records.", 401)
        with pytest.raises(AuthenticationError):
            AuthService(client).login("kai@example.com", "wrong")
        client.session_store.save_cookies.assert_not_called()


class TestLogout:
    def test_clears_session(self, client):
        AuthService(client).logout()
        client.post.assert_called_once_with("/logout")
        client.clear_session.assert_called_once()

    def test_clears_session_even_when_server_fails(self, client):
        client.post.side_effect = ServerError("boom", 500)
        with pytest.raises(ServerError):
            AuthService(client).logout()
        client.clear_session.assert_called_once()


class TestCurrentUser:
    """Test session checks."""

    def test_current_user(self, client):
        client.get.return_value = {"data": {"id": 2, "name": "Kai"}}
        assert AuthService(client).current_user().display_name == "Kai"
        client.get.assert_called_once_with("/user")

    def test_is_authenticated(self, client):
        client.get.return_value = {"id": 2}
        assert AuthService(client).is_authenticated()

    @pytest.mark.parametrize("status", [401, 419])
    def test_expired_session(self, client, status):
        client.get.side_effect = AuthenticationError("Unauthenticated.", status)
        assert not AuthService(client).is_authenticated()

    def test_other_errors_propagate(self, client):
        client.get.side_effect = ServerError("boom", 503)
        with pytest.raises(ServerError):
            AuthService(client).is_authenticated()

    def test_saved_user(self, client):
        client.session_store.saved_user.return_value = {"id": 3, "full_name": "Kai Staff"}
        assert AuthService(client).saved_user().id == 3
        client.session_store.saved_user.assert_called_once_with("http://api.test")

    def test_no_saved_user(self, client):
        client.session_store.saved_user.return_value = None
        assert AuthService(client).saved_user() is None
