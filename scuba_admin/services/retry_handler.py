"""
Retry handler with exponential backoff, jitter and a circuit breaker.

Only idempotent reads are routed through it: a retried POST could create a
second booking or payment on the server.
"""

import logging
import random
import threading
import time
from typing import Any, Callable, Optional

from scuba_admin.services.error_classifier import ErrorClassifier

logger = logging.getLogger(__name__)


class RetryExhaustedException(Exception):
    """Raised when all retry attempts have been exhausted."""

    def __init__(self, message: str, last_exception: Optional[BaseException] = None):
        super().__init__(message)
        self.last_exception = last_exception


class CircuitBreakerError(Exception):
    """Raised when the circuit breaker is open."""


class RetryHandler:
    """
    Retries transient API failures.

    Features:
    - Exponential backoff capped at ``max_delay`` with +/- jitter
    - Circuit breaker that fails fast after repeated exhausted calls
    - Thread-safe counters (bulk operations call it from a thread pool)
    """

    def __init__(
        self,
        max_retries: int = 3,
        base_delay: float = 1.0,
        max_delay: float = 30.0,
        exponential_base: float = 2,
        jitter_factor: float = 0.1,
        circuit_breaker_threshold: int = 5,
        circuit_breaker_timeout: float = 30.0,
        retry_condition: Optional[Callable[[BaseException], bool]] = None,
    ):
        """
        Initialize retry handler.

        Args:
            max_retries: Maximum number of retry attempts after the first call
            base_delay: Delay before the first retry (seconds)
            max_delay: Upper bound for any single delay (seconds)
            exponential_base: Growth factor between attempts
            jitter_factor: Relative jitter applied to each delay (0.0 to 1.0)
            circuit_breaker_threshold: Exhausted calls before the circuit opens
            circuit_breaker_timeout: Seconds before an open circuit is retried
            retry_condition: Predicate deciding whether an exception is transient
        """
        self.max_retries = max_retries
        self.base_delay = base_delay
        self.max_delay = max_delay
        self.exponential_base = exponential_base
        self.jitter_factor = jitter_factor
        self.circuit_breaker_threshold = circuit_breaker_threshold
        self.circuit_breaker_timeout = circuit_breaker_timeout
        self.retry_condition = retry_condition or ErrorClassifier().is_retryable

        self._circuit_open = False
        self._circuit_opened_at = 0.0
        self._failure_count = 0

        self._total_calls = 0
        self._total_retries = 0
        self._total_failures = 0

        self._lock = threading.Lock()

    def _calculate_delay(self, attempt: int) -> float:
        """Backoff delay for a 0-based attempt number."""
        delay = min(self.base_delay * (self.exponential_base**attempt), self.max_delay)
        jitter = random.uniform(-self.jitter_factor, self.jitter_factor) * delay
        return max(0.0, delay + jitter)

    def _is_circuit_open(self) -> bool:
        with self._lock:
            if not self._circuit_open:
                return False
            if time.time() - self._circuit_opened_at >= self.circuit_breaker_timeout:
                logger.info("Circuit breaker half-open, allowing a trial request")
                return False
            return True

    def _record_success(self):
        with self._lock:
            self._failure_count = 0
            if self._circuit_open:
                logger.info("Circuit breaker closed after successful request")
                self._circuit_open = False

    def _record_failure(self):
        with self._lock:
            self._failure_count += 1
            self._total_failures += 1
            if (
                not self._circuit_open
                and self._failure_count >= self.circuit_breaker_threshold
            ):
                logger.warning(
                    f"Circuit breaker opened after {self._failure_count} failures"
                )
                self._circuit_open = True
                self._circuit_opened_at = time.time()

    def execute_with_retry(self, func: Callable, *args, **kwargs) -> Any:
        """
        Call ``func`` and retry it while it raises transient errors.

        Raises:
            CircuitBreakerError: If the circuit breaker is open
            RetryExhaustedException: If every attempt failed transiently
            Exception: The original exception when it is not transient
        """
        with self._lock:
            self._total_calls += 1

        if self._is_circuit_open():
            raise CircuitBreakerError(
                "Too many consecutive API failures; pausing requests"
            )

        func_name = getattr(func, "__name__", repr(func))

        for attempt in range(self.max_retries + 1):
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                if not self.retry_condition(e):
                    raise

                if attempt >= self.max_retries:
                    logger.warning(f"Max retries ({self.max_retries}) exceeded for {func_name}")
                    self._record_failure()
                    raise RetryExhaustedException(
                        f"Max retries ({self.max_retries}) exceeded. "
                        f"Last error: {type(e).__name__}: {e}",
                        last_exception=e,
                    ) from e

                delay = self._calculate_delay(attempt)
                logger.debug(
                    f"Retrying {func_name} in {delay:.2f}s "
                    f"(attempt {attempt + 1}/{self.max_retries + 1}): {e}"
                )
                with self._lock:
                    self._total_retries += 1
                time.sleep(delay)
                continue

            if attempt > 0:
                logger.info(f"{func_name} succeeded after {attempt} retries")
            self._record_success()
            return result

    def get_retry_statistics(self) -> dict:
        """Get retry statistics."""
        with self._lock:
            return {
                "total_calls": self._total_calls,
                "total_retries": self._total_retries,
                "total_failures": self._total_failures,
                "circuit_breaker_open": self._circuit_open,
                "failure_count": self._failure_count,
            }

    def reset_circuit_breaker(self):
        """Manually close the circuit breaker."""
        with self._lock:
            self._circuit_open = False
            self._failure_count = 0
            self._circuit_opened_at = 0.0
        logger.info("Circuit breaker manually reset")
