r"""aretry - Retry policy engine for fallible operations.

This package decides how many times an operation is attempted, how long to
wait between attempts, which failures are retryable, and reports outcomes
through counters and events. It wraps plain callables and coroutine
functions so callers never hand-write retry loops.

Key Features:
    - Per-call retry state machine with attempt limits or unlimited attempts
    - Pluggable backoff: Constant, Linear, Exponential, Fibonacci, Randomized,
      or any ``Callable[[int], float]``
    - Failure classification by exception types and custom predicates
    - Thread-safe outcome counters shared by every call of a named instance
    - Event listeners for successes, retries, exhaustion and ignored failures
    - Blocking and asyncio-friendly adapters, cancellable backoff waits

Example:
    ```pycon
    >>> from aretry import Retry, RetryConfig, retryable
    >>> from aretry.backoff import ExponentialBackoff
    >>> backend = Retry.of(
    ...     "backend",
    ...     RetryConfig(max_attempts=5, interval_function=ExponentialBackoff(base_delay=0.1)),
    ... )
    >>> @retryable(backend)
    ... def ping() -> str:
    ...     return "pong"
    ...
    >>> ping()
    'pong'

    ```
"""

from __future__ import annotations

__all__ = [
    "INFINITE_ATTEMPTS",
    "EventPublisher",
    "MetricsSnapshot",
    "Retry",
    "RetryConfig",
    "RetryContext",
    "RetryEventType",
    "RetryInterruptedError",
    "RetryMetrics",
    "RetryRegistry",
    "RetryState",
    "__version__",
    "decorate_async_callable",
    "decorate_callable",
    "retryable",
]

from importlib.metadata import PackageNotFoundError, version

from aretry.config import INFINITE_ATTEMPTS, RetryConfig
from aretry.context import RetryContext, RetryState
from aretry.decorators import decorate_async_callable, decorate_callable, retryable
from aretry.events import RetryEventType
from aretry.exceptions import RetryInterruptedError
from aretry.metrics import MetricsSnapshot, RetryMetrics
from aretry.publisher import EventPublisher
from aretry.registry import RetryRegistry
from aretry.retry import Retry

try:
    __version__ = version(__name__)
except PackageNotFoundError:  # pragma: no cover
    # Package is not installed, fallback if needed
    __version__ = "0.0.0"
