"""Structured logging helpers: context fields, redaction and call tracing."""

import functools
import logging
import threading
import uuid
from typing import Any, Callable, Dict, Optional

_thread_local = threading.local()

# Substrings that mark a key as secret (matched case-insensitively)
SENSITIVE_FIELDS = {
    "password",
    "token",
    "secret",
    "cookie",
    "xsrf",
    "csrf",
    "authorization",
    "account_number",
    "swift_iban",
    "passport_no",
}

REDACTED = "***REDACTED***"


def generate_correlation_id() -> str:
    """Return a fresh id used to tie together the log lines of one command."""
    return uuid.uuid4().hex[:12]


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the fields currently attached to log records."""
    return dict(getattr(_thread_local, "context", {}))


class LogContext:
    """
    Context manager that adds fields to every log record emitted in its scope.

    Example:
        with LogContext(command="customers list", correlation_id="ab12"):
            logger.info("Fetching customers")
    """

    def __init__(self, **fields):
        self.fields = fields
        self.previous_context: Optional[Dict[str, Any]] = None

    def __enter__(self):
        if not hasattr(_thread_local, "context"):
            _thread_local.context = {}

        self.previous_context = _thread_local.context.copy()
        _thread_local.context.update(self.fields)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        _thread_local.context = self.previous_context or {}


class _ContextFilter(logging.Filter):
    """Copies the thread-local context fields onto each record."""

    def filter(self, record: logging.LogRecord) -> bool:
        for key, value in getattr(_thread_local, "context", {}).items():
            setattr(record, key, value)
        return True


def _is_sensitive(key: str) -> bool:
    lowered = key.lower()
    return any(marker in lowered for marker in SENSITIVE_FIELDS)


def sanitize_sensitive_data(data: Any) -> Any:
    """
    Redact secrets in a payload before it is logged.

    Dictionaries are walked recursively, including dictionaries nested in
    lists (bulk payloads are lists of rows). Non-container values are
    returned unchanged.

    Args:
        data: Request or response payload

    Returns:
        A copy with sensitive values replaced by ``***REDACTED***``
    """
    if isinstance(data, dict):
        sanitized: Dict[str, Any] = {}
        for key, value in data.items():
            if isinstance(key, str) and _is_sensitive(key):
                sanitized[key] = REDACTED if value is not None else None
            else:
                sanitized[key] = sanitize_sensitive_data(value)
        return sanitized

    if isinstance(data, list):
        return [sanitize_sensitive_data(item) for item in data]

    return data


def log_function_call(
    func: Optional[Callable] = None, *, include_args: bool = False, level: str = "DEBUG"
) -> Callable:
    """
    Decorator that logs entry, exit and exceptions of a function.

    Arguments are only logged when ``include_args`` is set, and then after
    redaction of keyword arguments.

    Example:
        @log_function_call(level="INFO")
        def bulk_return(service, equipment_ids):
            ...
    """

    def decorator(f: Callable) -> Callable:
        @functools.wraps(f)
        def wrapper(*args, **kwargs):
            logger = logging.getLogger(f.__module__)
            log_level = getattr(logging, level.upper())

            if include_args:
                safe_kwargs = sanitize_sensitive_data(kwargs)
                signature = ", ".join(
                    [repr(a) for a in args]
                    + [f"{k}={v!r}" for k, v in safe_kwargs.items()]
                )
                logger.log(log_level, f"Entering {f.__name__}({signature})")
            else:
                logger.log(log_level, f"Entering {f.__name__}")

            try:
                result = f(*args, **kwargs)
            except Exception as e:
                logger.error(f"Exception in {f.__name__}: {type(e).__name__}: {e}")
                raise

            logger.log(log_level, f"Exiting {f.__name__}")
            return result

        return wrapper

    if func is None:
        return decorator
    return decorator(func)
