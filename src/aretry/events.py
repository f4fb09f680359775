r"""Event types published by retry instances.

Every event is an immutable record tagged with a ``RetryEventType``.
Listeners are registered per event type on the ``EventPublisher``; dispatch
is driven by the tag, never by ``isinstance`` checks.

Example:
    ```pycon
    >>> from aretry import Retry
    >>> from aretry.events import RetryOnRetryEvent
    >>> def log_retry(event: RetryOnRetryEvent) -> None:
    ...     print(f"{event.retry_name}: attempt {event.number_of_attempts}, wait {event.wait_interval}s")
    ...
    >>> retry = Retry.of("backend")
    >>> retry.event_publisher.on_retry(log_retry)  # doctest: +ELLIPSIS
    <aretry.publisher.EventPublisher object at ...>

    ```
"""

from __future__ import annotations

__all__ = [
    "RetryEvent",
    "RetryEventType",
    "RetryOnErrorEvent",
    "RetryOnIgnoredErrorEvent",
    "RetryOnRetryEvent",
    "RetryOnSuccessEvent",
]

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import ClassVar


class RetryEventType(Enum):
    """Kinds of retry events.

    Attributes:
        SUCCESS: The call succeeded after at least one retry.
        RETRY: A retryable failure occurred and a wait is about to start.
        ERROR: All attempts were exhausted and the failure is propagated.
        IGNORED_ERROR: The failure was not retryable and is propagated.
    """

    SUCCESS = "success"
    RETRY = "retry"
    ERROR = "error"
    IGNORED_ERROR = "ignored_error"


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class RetryEvent:
    """Base class of all retry events.

    Attributes:
        retry_name: The name of the retry instance that published the event.
        number_of_attempts: The number of failed attempts when the event was
            created.
        last_failure: The failure that caused the event, if any.
        creation_time: When the event was created (UTC).
    """

    event_type: ClassVar[RetryEventType]

    retry_name: str
    number_of_attempts: int
    last_failure: BaseException | None
    creation_time: datetime = field(default_factory=_utcnow, kw_only=True)

    def __str__(self) -> str:
        return (
            f"{self.creation_time.isoformat()}: Retry '{self.retry_name}' "
            f"recorded {self.event_type.value} after {self.number_of_attempts} "
            f"attempt(s). Last failure: {self.last_failure!r}"
        )


@dataclass(frozen=True)
class RetryOnSuccessEvent(RetryEvent):
    """Published when a call succeeds after at least one retry."""

    event_type: ClassVar[RetryEventType] = RetryEventType.SUCCESS


@dataclass(frozen=True)
class RetryOnRetryEvent(RetryEvent):
    """Published before every wait between two attempts.

    Attributes:
        wait_interval: The wait in seconds before the next attempt.
    """

    event_type: ClassVar[RetryEventType] = RetryEventType.RETRY

    wait_interval: float = 0.0

    def __str__(self) -> str:
        return (
            f"{self.creation_time.isoformat()}: Retry '{self.retry_name}', "
            f"waiting {self.wait_interval}s until attempt '{self.number_of_attempts + 1}'. "
            f"Last failure: {self.last_failure!r}"
        )


@dataclass(frozen=True)
class RetryOnErrorEvent(RetryEvent):
    """Published when all attempts are exhausted."""

    event_type: ClassVar[RetryEventType] = RetryEventType.ERROR


@dataclass(frozen=True)
class RetryOnIgnoredErrorEvent(RetryEvent):
    """Published when a failure is classified as not retryable."""

    event_type: ClassVar[RetryEventType] = RetryEventType.IGNORED_ERROR

    number_of_attempts: int = 0
    last_failure: BaseException | None = None
