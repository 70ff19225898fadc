"""Unit tests for error classification."""

import socket

import pytest
import requests

from scuba_admin.services.error_classifier import ErrorClassifier, ErrorType
from scuba_admin.services.errors import (
    ApiConnectionError,
    ApiError,
    AuthenticationError,
    ServerError,
    ValidationFailedError,
)


class TestErrorClassifier:
    """Test cases for ErrorClassifier."""

    @pytest.fixture
    def classifier(self):
        return ErrorClassifier()

    @pytest.mark.parametrize("status", [429, 500, 502, 503, 504])
    def test_retryable_statuses(self, classifier, status):
        error = ApiError("failed", status_code=status)

        assert classifier.classify(error) == ErrorType.RETRYABLE
        assert classifier.is_retryable(error) is True

    @pytest.mark.parametrize(
        "error",
        [
            AuthenticationError("expired", status_code=401),
            ValidationFailedError("invalid", status_code=422),
            ApiError("missing", status_code=404),
        ],
    )
    def test_client_errors_are_fatal(self, classifier, error):
        """Test 4xx answers other than 429 are never retried."""
        assert classifier.classify(error) == ErrorType.FATAL

    @pytest.mark.parametrize(
        "error",
        [
            socket.timeout("timed out"),
            requests.exceptions.ConnectionError("refused"),
            requests.exceptions.Timeout("slow"),
            ApiConnectionError("Could not connect"),
        ],
    )
    def test_network_errors_are_retryable(self, classifier, error):
        assert classifier.classify(error) == ErrorType.RETRYABLE

    def test_unknown_errors(self, classifier):
        assert classifier.classify(ValueError("bad")) == ErrorType.UNKNOWN
        assert classifier.classify(ApiError("no status")) == ErrorType.UNKNOWN

    def test_descriptions(self, classifier):
        assert (
            classifier.get_error_description(ApiError("x", status_code=429))
            == "Rate limit error (HTTP 429) - retryable"
        )
        assert (
            classifier.get_error_description(ServerError("x", status_code=503))
            == "Server error (HTTP 503) - retryable"
        )
        assert (
            classifier.get_error_description(ApiError("x", status_code=403))
            == "Client error (HTTP 403) - fatal"
        )
        assert (
            classifier.get_error_description(requests.exceptions.Timeout())
            == "Network timeout error - retryable"
        )
        assert classifier.get_error_description(KeyError("k")).endswith("- unknown")

    def test_statistics(self, classifier):
        classifier.classify(ApiError("x", status_code=500))
        classifier.classify(ApiError("x", status_code=404))
        classifier.classify(ValueError())

        assert classifier.get_statistics() == {
            "retryable": 1,
            "fatal": 1,
            "unknown": 1,
            "total": 3,
        }

        classifier.reset_statistics()
        assert classifier.get_statistics()["total"] == 0
