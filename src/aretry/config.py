r"""Configuration dataclass and defaults for retry instances.

This module provides the immutable ``RetryConfig`` consumed by ``Retry``
and ``RetryContext``, together with the default values and the sentinel
used to request unlimited attempts.
"""

from __future__ import annotations

__all__ = [
    "DEFAULT_MAX_ATTEMPTS",
    "DEFAULT_WAIT_DURATION",
    "INFINITE_ATTEMPTS",
    "RetryConfig",
]

from dataclasses import dataclass, field, fields, replace
from typing import TYPE_CHECKING, Any

from aretry.backoff.constant import ConstantBackoff

if TYPE_CHECKING:
    from collections.abc import Callable

# Sentinel for max_attempts disabling the exhaustion check
INFINITE_ATTEMPTS = -1

# Default maximum number of attempts, including the first call
DEFAULT_MAX_ATTEMPTS = 3

# Default wait in seconds between two attempts
DEFAULT_WAIT_DURATION = 0.5


def _always_retry(exception: BaseException) -> bool:  # noqa: ARG001
    return True


@dataclass(frozen=True)
class RetryConfig:
    """Configuration for retry behavior.

    A failure is classified as retryable when all of the following hold:

    - it is not an instance of any type in ``ignore_exceptions``;
    - ``retry_exceptions`` is empty, or it is an instance of one of them;
    - ``retry_on_exception(failure)`` returns ``True``.

    Args:
        max_attempts: Maximum number of attempts including the first call.
            Must be >= 1, or ``INFINITE_ATTEMPTS`` to retry until the
            operation succeeds or a failure is not retryable.
        interval_function: Callable mapping the number of failed attempts
            (1-indexed) to the wait in seconds before the next attempt.
        retry_on_exception: Predicate deciding whether a failure should be
            retried.
        retry_exceptions: Exception types that are retried. Empty means
            every type is eligible.
        ignore_exceptions: Exception types that are never retried. Takes
            precedence over ``retry_exceptions``.

    Raises:
        ValueError: If ``max_attempts`` is invalid or a callable is missing.

    Example:
        ```pycon
        >>> from aretry.config import RetryConfig
        >>> config = RetryConfig()
        >>> config.max_attempts
        3
        >>> config = RetryConfig(max_attempts=5, ignore_exceptions=(KeyError,))
        >>> config.exception_predicate(KeyError("missing"))
        False
        >>> config.exception_predicate(TimeoutError())
        True
        >>> config.merge(max_attempts=10).max_attempts
        10

        ```
    """

    max_attempts: int = DEFAULT_MAX_ATTEMPTS
    interval_function: Callable[[int], float] = field(
        default_factory=lambda: ConstantBackoff(DEFAULT_WAIT_DURATION)
    )
    retry_on_exception: Callable[[BaseException], bool] = _always_retry
    retry_exceptions: tuple[type[BaseException], ...] = ()
    ignore_exceptions: tuple[type[BaseException], ...] = ()

    def __post_init__(self) -> None:
        if self.max_attempts != INFINITE_ATTEMPTS and self.max_attempts < 1:
            msg = (
                f"max_attempts must be >= 1 or INFINITE_ATTEMPTS ({INFINITE_ATTEMPTS}), "
                f"got {self.max_attempts}"
            )
            raise ValueError(msg)
        if not callable(self.interval_function):
            msg = f"interval_function must be callable, got {self.interval_function!r}"
            raise ValueError(msg)
        if not callable(self.retry_on_exception):
            msg = f"retry_on_exception must be callable, got {self.retry_on_exception!r}"
            raise ValueError(msg)
        # Accept lists for convenience, store tuples so the config stays hashable
        object.__setattr__(self, "retry_exceptions", tuple(self.retry_exceptions))
        object.__setattr__(self, "ignore_exceptions", tuple(self.ignore_exceptions))

    @property
    def is_infinite(self) -> bool:
        """Whether the exhaustion check is disabled."""
        return self.max_attempts == INFINITE_ATTEMPTS

    def exception_predicate(self, exception: BaseException) -> bool:
        """Classify a failure.

        Args:
            exception: The failure raised by the wrapped operation.

        Returns:
            ``True`` if the failure should be retried.
        """
        if self.ignore_exceptions and isinstance(exception, self.ignore_exceptions):
            return False
        if self.retry_exceptions and not isinstance(exception, self.retry_exceptions):
            return False
        return bool(self.retry_on_exception(exception))

    def merge(self, **overrides: Any) -> RetryConfig:
        """Create a new config with some values replaced.

        Args:
            **overrides: Field values to replace. Unknown names raise
                ``TypeError``.

        Returns:
            A new, validated ``RetryConfig``. This config is unchanged.
        """
        return replace(self, **overrides)

    def to_dict(self) -> dict[str, Any]:
        """Return the configuration as a shallow dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
