"""
Authenticated HTTP client for the dive center REST API.

The API uses cookie sessions with a CSRF token: state-changing requests need
an ``XSRF-TOKEN`` cookie obtained from ``/sanctum/csrf-cookie``, echoed back
in the ``X-XSRF-TOKEN`` header. A 419 answer means the token went stale.
"""

import logging
import threading
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union
from urllib.parse import unquote

import requests

from scuba_admin.config.settings import ScubaAdminConfig, get_config
from scuba_admin.services.errors import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    error_from_response,
)
from scuba_admin.services.retry_handler import RetryExhaustedException, RetryHandler
from scuba_admin.services.session_store import SessionStore
from scuba_admin.utils.logging_utils import sanitize_sensitive_data

logger = logging.getLogger(__name__)

API_PREFIX = "/api/v1"
CSRF_PATH = "/sanctum/csrf-cookie"
XSRF_COOKIE = "XSRF-TOKEN"
XSRF_HEADER = "X-XSRF-TOKEN"
CSRF_EXPIRED_STATUS = 419

STATE_CHANGING_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})

DEFAULT_HEADERS = {
    "Accept": "application/json",
    "Content-Type": "application/json",
    "X-Requested-With": "XMLHttpRequest",
}


def build_query(params: Optional[Mapping[str, Any]]) -> Dict[str, Any]:
    """
    Build query parameters, skipping unset values.

    ``None``, empty strings and empty lists are dropped; booleans become
    ``"true"``/``"false"``; numbers are stringified. ``0`` is kept.

    Args:
        params: Raw filter values

    Returns:
        Dict suitable for ``requests``' ``params`` argument
    """
    query: Dict[str, Any] = {}
    for key, value in (params or {}).items():
        if value is None or value == "" or value == []:
            continue
        if isinstance(value, bool):
            query[key] = "true" if value else "false"
        elif isinstance(value, (list, tuple)):
            query[f"{key}[]"] = [str(v) for v in value]
        else:
            query[key] = str(value)
    return query


class ApiClient:
    """
    Session-aware client shared by every resource service.

    Example:
        >>> client = ApiClient("http://localhost:8000")
        >>> client.get("/customers", params={"search": "smith"})
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 15.0,
        session: Optional[requests.Session] = None,
        retry_handler: Optional[RetryHandler] = None,
        session_store: Optional[SessionStore] = None,
        public_session: Optional[requests.Session] = None,
    ):
        """
        Initialize the client.

        Args:
            base_url: API origin, e.g. ``http://localhost:8000``
            timeout: Per-request timeout in seconds
            session: Session carrying the auth cookies
            retry_handler: Retry policy applied to GET requests
            session_store: Where cookies are persisted between runs
            public_session: Cookie-less session for token-based public calls
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update(DEFAULT_HEADERS)
        self.public_session = public_session or requests.Session()
        self.public_session.headers.update(DEFAULT_HEADERS)
        self.retry_handler = retry_handler or RetryHandler()
        self.session_store = session_store
        self._store_lock = threading.Lock()

        if self.session_store is not None:
            self.session_store.load_cookies(self.base_url, self.session.cookies)

    @classmethod
    def from_config(cls, config: Optional[ScubaAdminConfig] = None) -> "ApiClient":
        """Build a client from application settings."""
        config = config or get_config()
        return cls(
            base_url=config.api_base_url,
            timeout=config.request_timeout,
            retry_handler=RetryHandler(
                max_retries=config.max_retries, base_delay=config.retry_delay
            ),
            session_store=SessionStore(config.session_file),
        )

    def url_for(self, path: str) -> str:
        """Absolute URL for an API path (``/customers`` -> ``.../api/v1/customers``)."""
        if not path.startswith("/"):
            path = "/" + path
        if path.startswith((API_PREFIX + "/", CSRF_PATH)):
            return self.base_url + path
        return self.base_url + API_PREFIX + path

    # CSRF handling

    def xsrf_token(self) -> Optional[str]:
        """Decoded XSRF token from the cookie jar, if present."""
        raw = self.session.cookies.get(XSRF_COOKIE)
        return unquote(raw) if raw else None

    def refresh_csrf_token(self) -> None:
        """Fetch a fresh CSRF cookie from the server."""
        logger.debug("Requesting CSRF cookie")
        response = self._send(self.session, "GET", self.url_for(CSRF_PATH))
        if not response.ok:
            raise self._error_for(response, "GET", self.url_for(CSRF_PATH))

    def ensure_csrf_token(self) -> str:
        """Return the XSRF token, fetching the cookie when it is missing."""
        token = self.xsrf_token()
        if token is None:
            self.refresh_csrf_token()
            token = self.xsrf_token()
        if token is None:
            raise AuthenticationError(
                "The API did not issue a CSRF token",
                status_code=CSRF_EXPIRED_STATUS,
                method="GET",
                url=self.url_for(CSRF_PATH),
            )
        return token

    # Transport

    def _send(
        self, session: requests.Session, method: str, url: str, **kwargs
    ) -> requests.Response:
        try:
            return session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            raise ApiConnectionError(
                f"Request timed out after {self.timeout}s: {method} {url}",
                method=method,
                url=url,
            ) from e
        except requests.exceptions.ConnectionError as e:
            raise ApiConnectionError(
                f"Could not connect to {self.base_url}", method=method, url=url
            ) from e

    @staticmethod
    def _decode(response: requests.Response) -> Any:
        if response.status_code == 204 or not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    def _error_for(self, response: requests.Response, method: str, url: str):
        return error_from_response(response.status_code, self._decode(response), method, url)

    def _persist_cookies(self) -> None:
        if self.session_store is None:
            return
        with self._store_lock:
            try:
                self.session_store.save_cookies(self.base_url, self.session.cookies)
            except OSError as e:
                logger.warning(f"Could not save session cookies: {e}")

    def _fetch(self, method: str, url: str, **kwargs) -> requests.Response:
        response = self._send(self.session, method, url, **kwargs)
        if not response.ok:
            raise self._error_for(response, method, url)
        return response

    def _send_state_changing(self, method: str, url: str, **kwargs) -> requests.Response:
        headers = dict(kwargs.pop("headers", None) or {})

        headers[XSRF_HEADER] = self.ensure_csrf_token()
        response = self._send(self.session, method, url, headers=headers, **kwargs)

        if response.status_code == CSRF_EXPIRED_STATUS:
            logger.info(f"CSRF token expired on {method} {url}, refreshing and retrying once")
            self.refresh_csrf_token()
            headers[XSRF_HEADER] = self.ensure_csrf_token()
            response = self._send(self.session, method, url, headers=headers, **kwargs)

        if not response.ok:
            raise self._error_for(response, method, url)
        return response

    def request_raw(
        self,
        method: str,
        path: str,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        public: bool = False,
        **kwargs,
    ) -> requests.Response:
        """
        Perform a request and return the successful ``requests.Response``.

        Args:
            method: HTTP method
            path: API path relative to ``/api/v1``
            params: Query parameters (passed through :func:`build_query`)
            json: JSON body
            public: Send without session cookies or CSRF token

        Raises:
            ApiError: For any non-2xx answer (subclass chosen by status)
            ApiConnectionError: When the server cannot be reached
        """
        method = method.upper()
        url = self.url_for(path)
        query = build_query(params)
        if query:
            kwargs["params"] = query
        if json is not None:
            kwargs["json"] = json

        if logger.isEnabledFor(logging.DEBUG):
            body = sanitize_sensitive_data(json) if json is not None else None
            logger.debug(f"{method} {url} params={query or {}} body={body}")

        if public:
            response = self._send(self.public_session, method, url, **kwargs)
            if not response.ok:
                raise self._error_for(response, method, url)
            return response

        if method in STATE_CHANGING_METHODS:
            response = self._send_state_changing(method, url, **kwargs)
        else:
            try:
                response = self.retry_handler.execute_with_retry(
                    self._fetch, method, url, **kwargs
                )
            except RetryExhaustedException as e:
                if e.last_exception is None:
                    raise
                raise e.last_exception from e

        self._persist_cookies()
        return response

    def request(self, method: str, path: str, **kwargs) -> Any:
        """Perform a request and return the decoded JSON body (``None`` when empty)."""
        return self._decode(self.request_raw(method, path, **kwargs))

    def get(self, path: str, params: Optional[Mapping[str, Any]] = None, **kwargs) -> Any:
        return self.request("GET", path, params=params, **kwargs)

    def post(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("POST", path, json=json if json is not None else {}, **kwargs)

    def put(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("PUT", path, json=json if json is not None else {}, **kwargs)

    def patch(self, path: str, json: Any = None, **kwargs) -> Any:
        return self.request("PATCH", path, json=json if json is not None else {}, **kwargs)

    def delete(self, path: str, **kwargs) -> Any:
        return self.request("DELETE", path, **kwargs)

    def upload(
        self,
        path: str,
        file_path: Union[str, Path],
        fields: Optional[Mapping[str, Any]] = None,
        field_name: str = "file",
    ) -> Any:
        """
        POST a file as ``multipart/form-data``.

        Args:
            path: API path
            file_path: Local file to send
            fields: Extra form fields sent next to the file
            field_name: Form field holding the file

        Returns:
            Decoded JSON body
        """
        file_path = Path(file_path)
        data = {k: str(v) for k, v in (fields or {}).items() if v is not None}
        # Bytes rather than a handle: a 419 retry re-encodes the same body.
        content = file_path.read_bytes()
        # None removes the session-level JSON content type so requests
        # can set the multipart boundary itself.
        return self.request(
            "POST",
            path,
            data=data,
            files={field_name: (file_path.name, content)},
            headers={"Content-Type": None},
        )

    def download(
        self,
        path: str,
        destination: Union[str, Path],
        params: Optional[Mapping[str, Any]] = None,
        accept: str = "*/*",
        reject_json: bool = False,
    ) -> Path:
        """
        GET a binary resource and write it to ``destination``.

        Args:
            reject_json: Treat a JSON answer as an error instead of a file

        Returns:
            The written path

        Raises:
            ApiError: When ``reject_json`` is set and the server answered JSON
        """
        response = self.request_raw(
            "GET", path, params=params, headers={"Accept": accept}, stream=True
        )
        if reject_json and "application/json" in response.headers.get("Content-Type", ""):
            url = self.url_for(path)
            payload = self._decode(response)
            message = None
            if isinstance(payload, dict):
                message = payload.get("message") or payload.get("error")
            raise ApiError(
                message or f"Expected a file from {path} but the server answered JSON",
                status_code=response.status_code,
                payload=payload,
                method="GET",
                url=url,
            )

        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        with open(destination, "wb") as handle:
            for chunk in response.iter_content(chunk_size=65536):
                if chunk:
                    handle.write(chunk)
        logger.info(f"Downloaded {path} to {destination}")
        return destination

    def clear_session(self) -> None:
        """Drop cookies in memory and on disk."""
        self.session.cookies.clear()
        if self.session_store is not None:
            self.session_store.clear(self.base_url)
