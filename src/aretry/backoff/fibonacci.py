r"""Fibonacci backoff strategy."""

from __future__ import annotations

__all__ = ["FibonacciBackoff"]

from aretry.backoff.base import BaseBackoffStrategy, check_max_delay


class FibonacciBackoff(BaseBackoffStrategy):
    """Fibonacci backoff strategy.

    Calculates delay as: base_delay * fibonacci(attempt), with optional
    max_delay cap. The sequence (1, 1, 2, 3, 5, 8, ...) grows more gently
    than exponential backoff.

    Args:
        base_delay: The base delay in seconds (default: 1.0).
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from aretry.backoff import FibonacciBackoff
        >>> backoff = FibonacciBackoff(base_delay=1.0)
        >>> [backoff(attempt) for attempt in range(1, 7)]
        [1.0, 1.0, 2.0, 3.0, 5.0, 8.0]
        >>> FibonacciBackoff(base_delay=1.0, max_delay=10.0)(11)
        10.0

        ```
    """

    def __init__(self, base_delay: float = 1.0, max_delay: float | None = None) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        check_max_delay(max_delay)

        self.base_delay = base_delay
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate Fibonacci backoff delay.

        The sequence stops as soon as the delay reaches ``max_delay``, so
        a capped strategy stays cheap for arbitrarily large attempts.

        Args:
            attempt: The number of failed attempts so far (1-indexed).

        Returns:
            ``base_delay * fibonacci(attempt)``, capped at max_delay if set.
        """
        if attempt <= 0 or self.base_delay == 0:
            return 0.0
        previous, current = 0, 1
        for _ in range(attempt - 1):
            if self.max_delay is not None and self.base_delay * current >= self.max_delay:
                return self.max_delay
            previous, current = current, previous + current
        delay = self.base_delay * current
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
