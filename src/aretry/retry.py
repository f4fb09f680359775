r"""Named retry instances.

A ``Retry`` binds a name and a ``RetryConfig`` to the counters and the
event publisher shared by every call made through it. It is created once
and reused for the lifetime of the process; each call opens its own
``RetryContext``.
"""

from __future__ import annotations

__all__ = ["Retry"]

import logging
from typing import TYPE_CHECKING, Any, TypeVar

from aretry.config import RetryConfig
from aretry.context import RetryContext
from aretry.decorators import decorate_async_callable, decorate_callable, retryable
from aretry.metrics import RetryMetrics
from aretry.publisher import EventPublisher

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

logger: logging.Logger = logging.getLogger(__name__)

T = TypeVar("T")


class Retry:
    r"""Retry policy shared by many calls.

    Args:
        name: Identifier of the instance, carried by every event.
        config: The retry configuration. Defaults to ``RetryConfig()``.
        sleep_func: Optional blocking sleep used between synchronous
            attempts. See ``RetryContext``.

    Example:
        ```pycon
        >>> from aretry import Retry, RetryConfig
        >>> retry = Retry("inventory", RetryConfig(max_attempts=2, interval_function=lambda attempt: 0.0))
        >>> retry.execute(lambda: 42)
        42
        >>> retry.metrics.snapshot().successful_calls_without_retry
        1
        >>> retry.execute(int, "nan")
        Traceback (most recent call last):
            ...
        ValueError: invalid literal for int() with base 10: 'nan'
        >>> retry.metrics.snapshot().failed_calls_with_retry
        1

        ```
    """

    def __init__(
        self,
        name: str,
        config: RetryConfig | None = None,
        *,
        sleep_func: Callable[[float], None] | None = None,
    ) -> None:
        if not name:
            msg = "name must be a non-empty string"
            raise ValueError(msg)
        self._name = name
        self._config = config if config is not None else RetryConfig()
        self._sleep_func = sleep_func
        self._metrics = RetryMetrics()
        self._event_publisher = EventPublisher()
        logger.debug(f"Created retry '{name}' with max_attempts={self._config.max_attempts}")

    @classmethod
    def of(cls, name: str, config: RetryConfig | None = None) -> Retry:
        """Create a retry instance, with the default config if none is given."""
        return cls(name, config)

    def __repr__(self) -> str:
        return f"{self.__class__.__qualname__}(name={self._name!r}, config={self._config!r})"

    @property
    def name(self) -> str:
        return self._name

    @property
    def config(self) -> RetryConfig:
        return self._config

    @property
    def metrics(self) -> RetryMetrics:
        return self._metrics

    @property
    def event_publisher(self) -> EventPublisher:
        """The publisher used to subscribe to this instance's events."""
        return self._event_publisher

    def context(self) -> RetryContext:
        """Open the retry state of a new call."""
        return RetryContext(
            self._name,
            self._config,
            self._metrics,
            self._event_publisher,
            sleep_func=self._sleep_func,
        )

    def decorate(self, func: Callable[..., Any]) -> Callable[..., Any]:
        """Wrap ``func`` (sync or coroutine function) with this retry."""
        return retryable(self)(func)

    def execute(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Call ``func(*args, **kwargs)`` with blocking retries."""
        return decorate_callable(self, func)(*args, **kwargs)

    async def execute_async(
        self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any
    ) -> T:
        """Await ``func(*args, **kwargs)`` with non-blocking retries."""
        return await decorate_async_callable(self, func)(*args, **kwargs)
