r"""Randomized (jittered) backoff strategy."""

from __future__ import annotations

__all__ = ["RandomizedBackoff"]

import random
from typing import TYPE_CHECKING

from aretry.backoff.base import BaseBackoffStrategy

if TYPE_CHECKING:
    from collections.abc import Callable


class RandomizedBackoff(BaseBackoffStrategy):
    """Add uniform jitter around another interval function.

    The delay is drawn uniformly from
    ``[delay * (1 - randomization_factor), delay * (1 + randomization_factor)]``
    where ``delay`` is the wrapped strategy's value. Spreading the waits
    keeps many clients that failed together from retrying in lockstep.

    Args:
        strategy: The wrapped interval function.
        randomization_factor: Relative jitter width in ``[0, 1]``
            (default: 0.5).

    Example:
        ```pycon
        >>> from aretry.backoff import ConstantBackoff, RandomizedBackoff
        >>> backoff = RandomizedBackoff(ConstantBackoff(delay=1.0), randomization_factor=0.5)
        >>> 0.5 <= backoff(1) <= 1.5
        True

        ```
    """

    def __init__(
        self, strategy: Callable[[int], float], randomization_factor: float = 0.5
    ) -> None:
        if not 0 <= randomization_factor <= 1:
            msg = f"randomization_factor must be in [0, 1], got {randomization_factor}"
            raise ValueError(msg)

        self.strategy = strategy
        self.randomization_factor = randomization_factor

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(strategy={self.strategy!r}, "
            f"randomization_factor={self.randomization_factor})"
        )

    def calculate(self, attempt: int) -> float:
        delay = self.strategy(attempt)
        delta = self.randomization_factor * delay
        return max(0.0, random.uniform(delay - delta, delay + delta))  # noqa: S311
