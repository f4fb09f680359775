r"""Aggregate outcome counters shared by every call of a retry instance."""

from __future__ import annotations

__all__ = ["MetricsSnapshot", "RetryMetrics"]

import threading
from dataclasses import dataclass


@dataclass(frozen=True)
class MetricsSnapshot:
    """Point-in-time copy of the retry counters.

    Attributes:
        successful_calls_without_retry: Calls that succeeded on the first
            attempt.
        successful_calls_with_retry: Calls that succeeded after at least
            one retry.
        failed_calls_without_retry: Calls whose failure was not retryable.
        failed_calls_with_retry: Calls that exhausted all attempts.
    """

    successful_calls_without_retry: int = 0
    successful_calls_with_retry: int = 0
    failed_calls_without_retry: int = 0
    failed_calls_with_retry: int = 0


class RetryMetrics:
    """Thread-safe monotonic counters of call outcomes.

    Counters are only ever incremented. A snapshot reads each counter
    under the lock but does not promise that the four values belong to the
    same instant across concurrent updates.

    Example:
        ```pycon
        >>> from aretry.metrics import RetryMetrics
        >>> metrics = RetryMetrics()
        >>> metrics.record_success(retried=True)
        >>> metrics.record_failure(retried=False)
        >>> metrics.snapshot()
        MetricsSnapshot(successful_calls_without_retry=0, successful_calls_with_retry=1, failed_calls_without_retry=1, failed_calls_with_retry=0)

        ```
    """

    def __init__(self) -> None:
        self._successful_without_retry = 0
        self._successful_with_retry = 0
        self._failed_without_retry = 0
        self._failed_with_retry = 0
        self._lock = threading.Lock()

    def record_success(self, retried: bool) -> None:
        """Count a successful call.

        Args:
            retried: Whether at least one retry happened before success.
        """
        with self._lock:
            if retried:
                self._successful_with_retry += 1
            else:
                self._successful_without_retry += 1

    def record_failure(self, retried: bool) -> None:
        """Count a failed call.

        Args:
            retried: ``True`` if attempts were exhausted, ``False`` if the
                failure was rejected as not retryable.
        """
        with self._lock:
            if retried:
                self._failed_with_retry += 1
            else:
                self._failed_without_retry += 1

    @property
    def successful_calls_without_retry(self) -> int:
        with self._lock:
            return self._successful_without_retry

    @property
    def successful_calls_with_retry(self) -> int:
        with self._lock:
            return self._successful_with_retry

    @property
    def failed_calls_without_retry(self) -> int:
        with self._lock:
            return self._failed_without_retry

    @property
    def failed_calls_with_retry(self) -> int:
        with self._lock:
            return self._failed_with_retry

    def snapshot(self) -> MetricsSnapshot:
        """Return the current value of the four counters."""
        with self._lock:
            return MetricsSnapshot(
                successful_calls_without_retry=self._successful_without_retry,
                successful_calls_with_retry=self._successful_with_retry,
                failed_calls_without_retry=self._failed_without_retry,
                failed_calls_with_retry=self._failed_with_retry,
            )
