r"""Abstract base class for backoff strategies."""

from __future__ import annotations

__all__ = ["BaseBackoffStrategy"]

from abc import ABC, abstractmethod


class BaseBackoffStrategy(ABC):
    """Abstract base class for backoff strategies.

    A backoff strategy is an interval function: it maps the number of
    failed attempts so far to the delay before the next attempt. Instances
    are callable so they can be passed anywhere a plain
    ``Callable[[int], float]`` is expected.
    """

    def __call__(self, attempt: int) -> float:
        return self.calculate(attempt)

    @abstractmethod
    def calculate(self, attempt: int) -> float:
        """Calculate the wait interval after a failed attempt.

        Args:
            attempt: The number of failed attempts so far (1-indexed).
                attempt=1 is the wait after the first failure.

        Returns:
            The delay in seconds before the next attempt.
        """


def check_max_delay(max_delay: float | None) -> None:
    if max_delay is not None and max_delay <= 0:
        msg = f"max_delay must be positive if specified, got {max_delay}"
        raise ValueError(msg)
