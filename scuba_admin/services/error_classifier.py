"""
Error classification for deciding which API failures are worth retrying.
"""

import logging
import socket
from enum import Enum
from typing import Any, Dict

import requests.exceptions

from scuba_admin.services.errors import ApiConnectionError, ApiError

logger = logging.getLogger(__name__)


class ErrorType(Enum):
    """Classification of error types."""

    RETRYABLE = "retryable"  # 429, 5xx, network errors
    FATAL = "fatal"  # other 4xx, including auth and validation
    UNKNOWN = "unknown"


_NETWORK_ERRORS = (
    socket.timeout,
    requests.exceptions.ConnectionError,
    requests.exceptions.Timeout,
    ApiConnectionError,
)


class ErrorClassifier:
    """
    Classifies API failures as retryable, fatal or unknown.

    Keeps per-type counters so a long bulk run can report how many
    failures were transient.
    """

    def __init__(self):
        self._stats: Dict[str, int] = {"retryable": 0, "fatal": 0, "unknown": 0, "total": 0}

    def _count(self, error_type: ErrorType) -> ErrorType:
        self._stats["total"] += 1
        self._stats[error_type.value] += 1
        return error_type

    def classify(self, exception: BaseException) -> ErrorType:
        """
        Classify an exception.

        Args:
            exception: The exception to classify

        Returns:
            ErrorType classification
        """
        if isinstance(exception, _NETWORK_ERRORS):
            return self._count(ErrorType.RETRYABLE)

        if isinstance(exception, ApiError) and exception.status_code is not None:
            status_code = exception.status_code
            if status_code == 429 or 500 <= status_code < 600:
                return self._count(ErrorType.RETRYABLE)
            if 400 <= status_code < 500:
                return self._count(ErrorType.FATAL)

        return self._count(ErrorType.UNKNOWN)

    def is_retryable(self, exception: BaseException) -> bool:
        """Check if an exception should be retried."""
        return self.classify(exception) == ErrorType.RETRYABLE

    def get_error_description(self, exception: BaseException) -> str:
        """
        Get a human-readable error description.

        Args:
            exception: The exception to describe

        Returns:
            Description ending with the classification
        """
        error_type = self.classify(exception)

        if isinstance(exception, _NETWORK_ERRORS):
            if isinstance(exception, (socket.timeout, requests.exceptions.Timeout)):
                return f"Network timeout error - {error_type.value}"
            return f"Network connection error - {error_type.value}"

        if isinstance(exception, ApiError) and exception.status_code is not None:
            status_code = exception.status_code
            if status_code == 429:
                return f"Rate limit error (HTTP 429) - {error_type.value}"
            if 500 <= status_code < 600:
                return f"Server error (HTTP {status_code}) - {error_type.value}"
            return f"Client error (HTTP {status_code}) - {error_type.value}"

        return f"{type(exception).__name__}: {exception} - {error_type.value}"

    def get_statistics(self) -> Dict[str, Any]:
        """Get a copy of the classification counters."""
        return self._stats.copy()

    def reset_statistics(self):
        """Reset error statistics."""
        self._stats = {"retryable": 0, "fatal": 0, "unknown": 0, "total": 0}
