r"""Backoff policies mapping an attempt number to a wait interval.

All policies are callables taking the 1-indexed number of failed attempts
and returning the number of seconds to wait before the next attempt. Any
plain callable with the same shape can be used as an interval function.
"""

from __future__ import annotations

__all__ = [
    "BaseBackoffStrategy",
    "ConstantBackoff",
    "ExponentialBackoff",
    "FibonacciBackoff",
    "LinearBackoff",
    "RandomizedBackoff",
]

from aretry.backoff.base import BaseBackoffStrategy
from aretry.backoff.constant import ConstantBackoff
from aretry.backoff.exponential import ExponentialBackoff
from aretry.backoff.fibonacci import FibonacciBackoff
from aretry.backoff.linear import LinearBackoff
from aretry.backoff.randomized import RandomizedBackoff
