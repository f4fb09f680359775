r"""Adapters running callables under a retry instance.

The adapters own the attempt loop: they open a ``RetryContext`` per call,
invoke the wrapped callable, and report every outcome to the context.
Only ``Exception`` subclasses are reported; ``KeyboardInterrupt``,
``SystemExit`` and ``asyncio.CancelledError`` raised by the callable
propagate untouched.

Example:
    ```pycon
    >>> from aretry import Retry, RetryConfig, retryable
    >>> backend = Retry.of("backend", RetryConfig(interval_function=lambda attempt: 0.0))
    >>> calls = []
    >>> @retryable(backend)
    ... def fetch() -> str:
    ...     calls.append(1)
    ...     if len(calls) == 1:
    ...         raise TimeoutError("slow")
    ...     return "data"
    ...
    >>> fetch()
    'data'
    >>> backend.metrics.successful_calls_with_retry
    1

    ```
"""

from __future__ import annotations

__all__ = ["decorate_async_callable", "decorate_callable", "retryable"]

import functools
import inspect
from typing import TYPE_CHECKING, Any, TypeVar

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from aretry.retry import Retry

T = TypeVar("T")


def decorate_callable(retry: Retry, func: Callable[..., T]) -> Callable[..., T]:
    """Wrap a synchronous callable with blocking retries.

    Args:
        retry: The retry instance governing the attempts.
        func: The callable to wrap.

    Returns:
        A callable with the same signature. It returns the first successful
        result or raises the final failure unchanged.
    """

    @functools.wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> T:
        context = retry.context()
        while True:
            try:
                result = func(*args, **kwargs)
            except Exception as exc:
                context.on_error(exc)
            else:
                context.on_success()
                return result

    return wrapper


def decorate_async_callable(
    retry: Retry, func: Callable[..., Awaitable[T]]
) -> Callable[..., Awaitable[T]]:
    """Wrap a coroutine function with non-blocking retries.

    Args:
        retry: The retry instance governing the attempts.
        func: The coroutine function to wrap.

    Returns:
        A coroutine function with the same signature. Backoff waits use
        ``asyncio.sleep`` and never block the event loop.
    """

    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> T:
        context = retry.context()
        while True:
            try:
                result = await func(*args, **kwargs)
            except Exception as exc:
                await context.on_error_async(exc)
            else:
                context.on_success()
                return result

    return wrapper


def retryable(retry: Retry) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    """Create a decorator applying ``retry`` to a function.

    Coroutine functions get the non-blocking adapter, everything else the
    blocking one.

    Args:
        retry: The retry instance governing the attempts.

    Returns:
        The decorator.
    """

    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        if inspect.iscoroutinefunction(func):
            return decorate_async_callable(retry, func)
        return decorate_callable(retry, func)

    return decorator
