r"""Unit tests for backoff strategies."""

from __future__ import annotations

from unittest.mock import patch

import pytest

from aretry.backoff import (
    BaseBackoffStrategy,
    ConstantBackoff,
    ExponentialBackoff,
    FibonacciBackoff,
    LinearBackoff,
    RandomizedBackoff,
)

#####################################
#     Tests for ConstantBackoff     #
#####################################


def test_constant_backoff_returns_same_delay() -> None:
    """Test that every attempt waits the configured delay."""
    backoff = ConstantBackoff(delay=2.5)
    assert [backoff(attempt) for attempt in range(1, 5)] == [2.5, 2.5, 2.5, 2.5]


def test_constant_backoff_default_delay() -> None:
    """Test the default delay of 0.5 seconds."""
    assert ConstantBackoff()(1) == 0.5


def test_constant_backoff_invalid_delay() -> None:
    """Test that a negative delay raises ValueError."""
    with pytest.raises(ValueError, match=r"delay must be non-negative"):
        ConstantBackoff(delay=-1.0)


###################################
#     Tests for LinearBackoff     #
###################################


def test_linear_backoff_grows_linearly() -> None:
    """Test that the delay is base_delay * attempt."""
    backoff = LinearBackoff(base_delay=1.5)
    assert backoff(1) == 1.5
    assert backoff(2) == 3.0
    assert backoff(4) == 6.0


def test_linear_backoff_with_max_delay() -> None:
    """Test that the delay is capped at max_delay."""
    backoff = LinearBackoff(base_delay=2.0, max_delay=5.0)
    assert backoff(2) == 4.0
    assert backoff(3) == 5.0
    assert backoff(100) == 5.0


def test_linear_backoff_invalid_max_delay() -> None:
    """Test that a non-positive max_delay raises ValueError."""
    with pytest.raises(ValueError, match=r"max_delay must be positive"):
        LinearBackoff(max_delay=0)


########################################
#     Tests for ExponentialBackoff     #
########################################


def test_exponential_backoff_first_wait_is_base_delay() -> None:
    """Test that attempt 1 waits exactly base_delay."""
    assert ExponentialBackoff(base_delay=0.3, multiplier=3.0)(1) == 0.3


def test_exponential_backoff_grows_by_multiplier() -> None:
    """Test exponential growth of the delay."""
    backoff = ExponentialBackoff(base_delay=1.0, multiplier=2.0)
    assert [backoff(attempt) for attempt in range(1, 5)] == [1.0, 2.0, 4.0, 8.0]


def test_exponential_backoff_default_values() -> None:
    """Test the default base delay and multiplier."""
    backoff = ExponentialBackoff()
    assert backoff.base_delay == 0.5
    assert backoff.multiplier == 1.5
    assert backoff.max_delay is None
    assert backoff(2) == 0.75


def test_exponential_backoff_with_max_delay() -> None:
    """Test that the delay is capped at max_delay."""
    backoff = ExponentialBackoff(base_delay=1.0, multiplier=2.0, max_delay=5.0)
    assert backoff(3) == 4.0
    assert backoff(4) == 5.0
    assert backoff(30) == 5.0


@pytest.mark.parametrize(
    ("kwargs", "message"),
    [
        ({"base_delay": -1.0}, r"base_delay must be non-negative"),
        ({"multiplier": 0.5}, r"multiplier must be >= 1"),
        ({"max_delay": -5.0}, r"max_delay must be positive"),
    ],
)
def test_exponential_backoff_invalid_arguments(kwargs: dict, message: str) -> None:
    """Test that invalid arguments raise ValueError."""
    with pytest.raises(ValueError, match=message):
        ExponentialBackoff(**kwargs)


def test_exponential_backoff_capped_large_attempt() -> None:
    """Test that a capped delay does not overflow for huge attempt numbers."""
    backoff = ExponentialBackoff(base_delay=0.001, multiplier=1.5, max_delay=0.01)
    assert backoff(3000) == 0.01
    assert backoff(10**9) == 0.01


def test_exponential_backoff_zero_base_delay_large_attempt() -> None:
    """Test that a zero base delay stays zero for huge attempt numbers."""
    assert ExponentialBackoff(base_delay=0.0, multiplier=2.0)(5000) == 0.0


######################################
#     Tests for FibonacciBackoff     #
######################################


def test_fibonacci_backoff_sequence() -> None:
    """Test that delays follow the Fibonacci sequence."""
    backoff = FibonacciBackoff(base_delay=0.5)
    assert [backoff(attempt) for attempt in range(1, 8)] == [0.5, 0.5, 1.0, 1.5, 2.5, 4.0, 6.5]


def test_fibonacci_backoff_with_max_delay() -> None:
    """Test that the delay is capped at max_delay."""
    backoff = FibonacciBackoff(base_delay=1.0, max_delay=10.0)
    assert backoff(6) == 8.0
    assert backoff(7) == 10.0


def test_fibonacci_backoff_capped_large_attempt() -> None:
    """Test that a capped delay does not overflow for huge attempt numbers."""
    backoff = FibonacciBackoff(base_delay=0.001, max_delay=0.01)
    assert backoff(2000) == 0.01
    assert backoff(10**9) == 0.01


def test_fibonacci_backoff_zero_base_delay() -> None:
    """Test that a zero base delay stays zero."""
    assert FibonacciBackoff(base_delay=0.0)(5000) == 0.0


def test_fibonacci_backoff_invalid_base_delay() -> None:
    """Test that a negative base_delay raises ValueError."""
    with pytest.raises(ValueError, match=r"base_delay must be non-negative"):
        FibonacciBackoff(base_delay=-0.1)


#######################################
#     Tests for RandomizedBackoff     #
#######################################


def test_randomized_backoff_bounds() -> None:
    """Test that the jitter range is centered on the wrapped delay."""
    backoff = RandomizedBackoff(ConstantBackoff(delay=2.0), randomization_factor=0.25)
    with patch("aretry.backoff.randomized.random.uniform", return_value=1.7) as uniform:
        assert backoff(1) == 1.7
    uniform.assert_called_once_with(1.5, 2.5)


def test_randomized_backoff_stays_in_range() -> None:
    """Test that sampled delays stay within the jitter range."""
    backoff = RandomizedBackoff(LinearBackoff(base_delay=1.0), randomization_factor=0.5)
    for _ in range(100):
        assert 1.0 <= backoff(2) <= 3.0


def test_randomized_backoff_accepts_plain_callable() -> None:
    """Test wrapping a plain function."""
    backoff = RandomizedBackoff(lambda attempt: 10.0 * attempt, randomization_factor=0.0)
    assert backoff(3) == 30.0


def test_randomized_backoff_invalid_factor() -> None:
    """Test that a factor outside [0, 1] raises ValueError."""
    with pytest.raises(ValueError, match=r"randomization_factor must be in \[0, 1\]"):
        RandomizedBackoff(ConstantBackoff(), randomization_factor=1.5)


#########################################
#     Tests for BaseBackoffStrategy     #
#########################################


def test_base_backoff_strategy_call_delegates_to_calculate() -> None:
    """Test that calling a strategy uses calculate."""

    class SquareBackoff(BaseBackoffStrategy):
        def calculate(self, attempt: int) -> float:
            return float(attempt * attempt)

    assert SquareBackoff()(3) == 9.0


def test_base_backoff_strategy_is_abstract() -> None:
    """Test that the base class cannot be instantiated."""
    with pytest.raises(TypeError):
        BaseBackoffStrategy()  # type: ignore[abstract]
