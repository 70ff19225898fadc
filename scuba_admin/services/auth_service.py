"""
Login, logout and current-user lookups.
"""

import logging
from typing import Optional

from scuba_admin.models.auth import LoginForm, User
from scuba_admin.services.api_client import ApiClient
from scuba_admin.services.base import unwrap_record
from scuba_admin.services.errors import ApiError

logger = logging.getLogger(__name__)


class AuthService:
    """Cookie-session authentication against ``/login`` and ``/logout``."""

    def __init__(self, client: ApiClient):
        self.client = client

    @staticmethod
    def _user(payload) -> User:
        payload = unwrap_record(payload)
        if isinstance(payload, dict) and isinstance(payload.get("user"), dict):
            payload = payload["user"]
        return User.model_validate(payload)

    def login(self, email: str, password: str) -> User:
        """
        Log in and keep the session cookie.

        Raises:
            pydantic.ValidationError: If the email or password is malformed
            AuthenticationError: If the credentials are rejected
        """
        form = LoginForm(email=email, password=password)
        self.client.refresh_csrf_token()
        payload = self.client.post("/login", json=form.to_payload())
        user = self._user(payload)

        if self.client.session_store is not None:
            self.client.session_store.save_cookies(
                self.client.base_url, self.client.session.cookies, user=user.model_dump()
            )
        logger.info(f"Logged in as {user.display_name}")
        return user

    def logout(self) -> None:
        """Log out on the server and forget the local session."""
        try:
            self.client.post("/logout")
        finally:
            self.client.clear_session()
        logger.info("Logged out")

    def current_user(self) -> User:
        """The user owning the current session."""
        return self._user(self.client.get("/user"))

    def saved_user(self) -> Optional[User]:
        """User stored at the last login, without contacting the server."""
        if self.client.session_store is None:
            return None
        data = self.client.session_store.saved_user(self.client.base_url)
        return User.model_validate(data) if data else None

    def is_authenticated(self) -> bool:
        try:
            self.current_user()
        except ApiError as e:
            if e.status_code in (401, 419):
                return False
            raise
        return True
