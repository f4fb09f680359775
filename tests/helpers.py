r"""Shared helpers for building fallible operations in tests."""

from __future__ import annotations

__all__ = ["FlakyOperation", "make_async_flaky"]

from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable


class FlakyOperation:
    """Callable raising the given failures in order, then returning
    ``result``.

    Attributes:
        calls: The number of times the operation was invoked.
    """

    def __init__(self, *failures: BaseException, result: Any = "ok") -> None:
        self.failures = failures
        self.result = result
        self.calls = 0

    def __call__(self) -> Any:
        self.calls += 1
        if self.calls <= len(self.failures):
            raise self.failures[self.calls - 1]
        return self.result


def make_async_flaky(operation: FlakyOperation) -> Callable[[], Awaitable[Any]]:
    """Wrap a ``FlakyOperation`` in a coroutine function."""

    async def run() -> Any:
        return operation()

    return run
