"""
API error types and user-facing error message helpers.

Every non-2xx response from the dive center API becomes an :class:`ApiError`
subclass chosen by status code. The helpers at the bottom turn those errors
into the short messages shown to staff.
"""

import json
from typing import Any, Dict, List, Mapping, Optional

DEFAULT_CONFLICT_HEADER = "Equipment is not available for the requested dates."


class ApiError(Exception):
    """Raised when the API answers with a non-2xx status."""

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        payload: Optional[Any] = None,
        method: Optional[str] = None,
        url: Optional[str] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.payload = payload if payload is not None else {}
        self.method = method
        self.url = url
        super().__init__(message)

    @property
    def data(self) -> Dict[str, Any]:
        """Response body as a dict (empty when the body was not a JSON object)."""
        return self.payload if isinstance(self.payload, dict) else {}


class ApiConnectionError(ApiError):
    """The API could not be reached (DNS, refused connection, timeout)."""


class AuthenticationError(ApiError):
    """Session missing or expired (401), or CSRF token rejected twice (419)."""


class PermissionDeniedError(ApiError):
    """The logged-in user may not access the resource (403)."""


class NotFoundError(ApiError):
    """The resource does not exist (404)."""


class ValidationFailedError(ApiError):
    """The server rejected the payload (422)."""

    @property
    def errors(self) -> Dict[str, List[str]]:
        raw = self.data.get("errors") or {}
        return raw if isinstance(raw, dict) else {}


class AvailabilityConflictError(ValidationFailedError):
    """A 422 whose body lists equipment assignments overlapping the request."""

    @property
    def conflicts(self) -> List[Dict[str, Any]]:
        return list(self.data.get("conflicting_assignments") or [])


class ServerError(ApiError):
    """The API failed internally (5xx)."""


def _payload_message(payload: Mapping[str, Any]) -> Optional[str]:
    for key in ("message", "error"):
        value = payload.get(key)
        if value:
            return str(value)
    if payload.get("errors"):
        return json.dumps(payload["errors"])
    return None


def error_from_response(
    status_code: int,
    payload: Any,
    method: Optional[str] = None,
    url: Optional[str] = None,
) -> ApiError:
    """
    Build the ApiError subclass matching an HTTP status.

    Args:
        status_code: HTTP status of the failed response
        payload: Decoded JSON body, or raw text when the body was not JSON
        method: HTTP method of the request
        url: Request URL

    Returns:
        An ApiError instance (not raised)
    """
    message = None
    if isinstance(payload, dict):
        message = _payload_message(payload)
    if not message:
        message = f"HTTP {status_code} for {method or 'request'} {url or ''}".strip()

    if status_code in (401, 419):
        cls = AuthenticationError
    elif status_code == 403:
        cls = PermissionDeniedError
    elif status_code == 404:
        cls = NotFoundError
    elif status_code == 422:
        if isinstance(payload, dict) and payload.get("conflicting_assignments"):
            cls = AvailabilityConflictError
        else:
            cls = ValidationFailedError
    elif 500 <= status_code < 600:
        cls = ServerError
    else:
        cls = ApiError

    return cls(message, status_code=status_code, payload=payload, method=method, url=url)


def extract_error_message(
    error: BaseException, default: str = "Something went wrong. Please try again."
) -> str:
    """
    Best-effort message for an error, in the order staff expect.

    ``message`` from the response body, then ``error``, then the JSON of
    ``errors``, then the exception text, then ``default``.
    """
    if isinstance(error, ApiError):
        body_message = _payload_message(error.data)
        if body_message:
            return body_message
    text = str(error)
    return text if text else default


def first_validation_error(error: ValidationFailedError) -> Optional[str]:
    """Return the first message of the first invalid field, if any."""
    for messages in error.errors.values():
        if isinstance(messages, list) and messages:
            return str(messages[0])
        if messages:
            return str(messages)
    return None


def format_conflict_message(payload: Mapping[str, Any]) -> str:
    """
    Render a 422 availability conflict as a multi-line message.

    Args:
        payload: Response body carrying ``conflicting_assignments`` and the
            requested ``checkout_date``/``return_date``

    Returns:
        Header, requested dates and a numbered list of conflicts
    """
    header = payload.get("message") or DEFAULT_CONFLICT_HEADER
    lines = [
        str(header),
        "",
        f"Requested dates: {payload.get('checkout_date')} to {payload.get('return_date')}",
        "",
        "Conflicting assignments:",
    ]

    for index, conflict in enumerate(payload.get("conflicting_assignments") or [], 1):
        customer = f"{index}. Customer: {conflict.get('customer_name', 'Unknown')}"
        if conflict.get("basket_no"):
            customer += f" (Basket: {conflict['basket_no']})"
        lines.append("")
        lines.append(customer)
        lines.append(
            f"   Dates: {conflict.get('checkout_date')} to {conflict.get('return_date')}"
        )
        if conflict.get("assignment_status"):
            lines.append(f"   Status: {conflict['assignment_status']}")

    return "\n".join(lines)


def describe_error(error: BaseException, default: str) -> str:
    """Conflict-aware variant of :func:`extract_error_message`."""
    if isinstance(error, AvailabilityConflictError):
        return format_conflict_message(error.data)
    return extract_error_message(error, default)
