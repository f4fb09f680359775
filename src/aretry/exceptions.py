r"""Exceptions raised by the retry engine itself.

Failures of the wrapped operation are never wrapped: terminal paths
re-raise the original exception object. The classes here describe
conditions that belong to the engine.
"""

from __future__ import annotations

__all__ = ["RetryInterruptedError"]


class RetryInterruptedError(RuntimeError):
    """Raised when the wait between two attempts is interrupted.

    When a failure had already been recorded, the context re-raises that
    failure and attaches this exception as its ``__cause__`` so callers can
    tell "cancelled while waiting" apart from "operation failed".

    Args:
        retry_name: The name of the retry instance whose wait was
            interrupted.
        attempt: The number of failed attempts at the time of interruption.

    Example:
        ```pycon
        >>> from aretry.exceptions import RetryInterruptedError
        >>> raise RetryInterruptedError("backend", attempt=2)
        Traceback (most recent call last):
            ...
        aretry.exceptions.RetryInterruptedError: Wait before attempt 3 of retry 'backend' was interrupted

        ```
    """

    def __init__(self, retry_name: str, attempt: int) -> None:
        super().__init__(
            f"Wait before attempt {attempt + 1} of retry '{retry_name}' was interrupted"
        )
        self.retry_name = retry_name
        self.attempt = attempt
