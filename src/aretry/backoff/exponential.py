r"""Exponential backoff strategy."""

from __future__ import annotations

__all__ = ["ExponentialBackoff"]

import math

from aretry.backoff.base import BaseBackoffStrategy, check_max_delay


class ExponentialBackoff(BaseBackoffStrategy):
    """Exponential backoff strategy.

    Calculates delay as: base_delay * (multiplier ** (attempt - 1)), with
    optional max_delay cap. The first wait is always ``base_delay``.

    Args:
        base_delay: The delay in seconds after the first failure
            (default: 0.5).
        multiplier: The growth factor between consecutive waits. Must be
            >= 1 (default: 1.5).
        max_delay: Optional maximum delay cap in seconds.

    Example:
        ```pycon
        >>> from aretry.backoff import ExponentialBackoff
        >>> backoff = ExponentialBackoff(base_delay=0.5, multiplier=2.0)
        >>> backoff(1)
        0.5
        >>> backoff(2)
        1.0
        >>> backoff(3)
        2.0
        >>> backoff = ExponentialBackoff(base_delay=1.0, multiplier=2.0, max_delay=5.0)
        >>> backoff(10)  # Would be 512.0, but capped
        5.0

        ```
    """

    def __init__(
        self,
        base_delay: float = 0.5,
        multiplier: float = 1.5,
        max_delay: float | None = None,
    ) -> None:
        if base_delay < 0:
            msg = f"base_delay must be non-negative, got {base_delay}"
            raise ValueError(msg)
        if multiplier < 1:
            msg = f"multiplier must be >= 1, got {multiplier}"
            raise ValueError(msg)
        check_max_delay(max_delay)

        self.base_delay = base_delay
        self.multiplier = multiplier
        self.max_delay = max_delay

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(base_delay={self.base_delay}, "
            f"multiplier={self.multiplier}, max_delay={self.max_delay})"
        )

    def calculate(self, attempt: int) -> float:
        """Calculate exponential backoff delay.

        Args:
            attempt: The number of failed attempts so far (1-indexed).

        Returns:
            ``base_delay * multiplier ** (attempt - 1)``, capped at
            max_delay if set.
        """
        if self.base_delay == 0:
            return 0.0
        if self.max_delay is not None:
            if self.base_delay >= self.max_delay:
                return self.max_delay
            # Cap reached, skip the power which overflows for large attempts
            if self.multiplier > 1 and (attempt - 1) * math.log(self.multiplier) >= math.log(
                self.max_delay / self.base_delay
            ):
                return self.max_delay
        delay = self.base_delay * (self.multiplier ** (attempt - 1))
        if self.max_delay is not None:
            delay = min(delay, self.max_delay)
        return delay
