r"""Per-call retry state machine.

A ``RetryContext`` is opened for every logical call of a retry instance.
The caller reports each attempt's outcome; the context classifies the
failure, updates the shared counters, publishes events and either waits
for the backoff interval (the caller should try again) or re-raises the
failure (the caller should stop).

Example:
    ```pycon
    >>> from aretry import Retry, RetryConfig
    >>> retry = Retry.of("doc", RetryConfig(max_attempts=3, interval_function=lambda attempt: 0.0))
    >>> attempts = []
    >>> def flaky() -> str:
    ...     attempts.append(1)
    ...     if len(attempts) < 3:
    ...         raise ConnectionError("unreachable")
    ...     return "ok"
    ...
    >>> context = retry.context()
    >>> while True:
    ...     try:
    ...         result = flaky()
    ...     except ConnectionError as exc:
    ...         context.on_error(exc)
    ...     else:
    ...         context.on_success()
    ...         break
    ...
    >>> result, context.attempt_count
    ('ok', 2)

    ```
"""

from __future__ import annotations

__all__ = ["RetryContext", "RetryState"]

import asyncio
import logging
import threading
from enum import Enum
from typing import TYPE_CHECKING, NoReturn

from aretry.events import (
    RetryEventType,
    RetryOnErrorEvent,
    RetryOnIgnoredErrorEvent,
    RetryOnRetryEvent,
    RetryOnSuccessEvent,
)
from aretry.exceptions import RetryInterruptedError
from aretry.utils.structured_logging import log_structured

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.config import RetryConfig
    from aretry.events import RetryEvent
    from aretry.metrics import RetryMetrics
    from aretry.publisher import EventPublisher

logger: logging.Logger = logging.getLogger(__name__)


class RetryState(Enum):
    """States of a retry context.

    Attributes:
        ATTEMPTING: The wrapped operation may be (re)invoked.
        WAITING: A retryable failure was recorded and the backoff wait runs.
        SUCCEEDED: The operation succeeded. Terminal.
        EXHAUSTED: A retryable failure hit the attempt limit. Terminal.
        REJECTED: A failure was not retryable. Terminal.
    """

    ATTEMPTING = "attempting"
    WAITING = "waiting"
    SUCCEEDED = "succeeded"
    EXHAUSTED = "exhausted"
    REJECTED = "rejected"


class RetryContext:
    r"""Retry state of one logical call.

    The context is owned by a single call, but its fields are read and
    written under a lock so that a thread calling ``cancel`` can race
    with the thread running the operation.

    Args:
        name: The name of the owning retry instance.
        config: The retry configuration.
        metrics: The counters shared by all calls of the retry instance.
        publisher: The event publisher of the retry instance.
        sleep_func: Optional blocking sleep ``(seconds) -> None``. If
            ``None``, the wait blocks on an event that ``cancel`` sets, so
            cancellation wakes it immediately. A custom sleep function may
            raise ``InterruptedError`` or ``RetryInterruptedError`` to
            signal an interruption.
    """

    def __init__(
        self,
        name: str,
        config: RetryConfig,
        metrics: RetryMetrics,
        publisher: EventPublisher,
        sleep_func: Callable[[float], None] | None = None,
    ) -> None:
        self._name = name
        self._config = config
        self._metrics = metrics
        self._publisher = publisher
        self._sleep_func = sleep_func

        # Per-call state (protected by lock)
        self._attempt_count = 0
        self._last_failure: BaseException | None = None
        self._state = RetryState.ATTEMPTING
        self._interrupted = False
        self._lock = threading.Lock()
        self._cancelled = threading.Event()
        self._async_wakeup: tuple[asyncio.AbstractEventLoop, asyncio.Event] | None = None

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__qualname__}(name={self._name!r}, "
            f"attempt_count={self.attempt_count}, state={self.state.value})"
        )

    @property
    def name(self) -> str:
        return self._name

    @property
    def attempt_count(self) -> int:
        """The number of retryable failures recorded so far."""
        with self._lock:
            return self._attempt_count

    @property
    def last_failure(self) -> BaseException | None:
        """The most recent retryable failure, or ``None``."""
        with self._lock:
            return self._last_failure

    @property
    def state(self) -> RetryState:
        with self._lock:
            return self._state

    @property
    def interrupted(self) -> bool:
        """Whether a backoff wait of this context was interrupted."""
        with self._lock:
            return self._interrupted

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def cancel(self) -> None:
        """Interrupt the current or next backoff wait.

        Safe to call from any thread. The interrupted wait re-raises the
        last recorded failure.
        """
        with self._lock:
            self._cancelled.set()
            wakeup = self._async_wakeup
        if wakeup is not None:
            loop, event = wakeup
            loop.call_soon_threadsafe(event.set)

    def on_success(self) -> None:
        """Record that the current attempt succeeded."""
        with self._lock:
            self._state = RetryState.SUCCEEDED
            attempts = self._attempt_count
            last_failure = self._last_failure

        if attempts > 0:
            self._metrics.record_success(retried=True)
            log_structured(
                logger,
                logging.DEBUG,
                f"Retry '{self._name}' succeeded after {attempts} failed attempt(s)",
                retry_name=self._name,
                attempt=attempts,
            )
            self._publish(
                RetryEventType.SUCCESS,
                lambda: RetryOnSuccessEvent(self._name, attempts, last_failure),
            )
        else:
            self._metrics.record_success(retried=False)

    def on_error(self, exception: BaseException) -> None:
        """Record a failed attempt and wait if it should be retried.

        Returns normally when the caller should invoke the operation
        again, after the backoff wait has elapsed.

        Args:
            exception: The failure raised by the wrapped operation.

        Raises:
            BaseException: ``exception`` itself when it is not retryable or
                when the attempts are exhausted. The last recorded failure,
                caused by a ``RetryInterruptedError``, when the wait is
                interrupted.
        """
        interval = self._record_failure(exception)
        if self._sleep_func is None:
            if self._cancelled.wait(interval):
                self._raise_interrupted(RetryInterruptedError(self._name, self.attempt_count))
        else:
            try:
                if self._cancelled.is_set():
                    raise RetryInterruptedError(self._name, self.attempt_count)
                self._sleep_func(interval)
            except (RetryInterruptedError, InterruptedError) as exc:
                self._raise_interrupted(exc)
        self._resume()

    async def on_error_async(self, exception: BaseException) -> None:
        """Asynchronous variant of ``on_error``.

        Classification, counting and events are identical; the backoff
        wait suspends the running task instead of blocking the thread.
        Calling ``cancel`` from any thread or task, or cancelling the
        task, during the wait re-raises the last recorded failure, caused
        by a ``RetryInterruptedError``.

        Args:
            exception: The failure raised by the wrapped operation.
        """
        interval = self._record_failure(exception)
        loop = asyncio.get_running_loop()
        wakeup = asyncio.Event()
        with self._lock:
            cancelled = self._cancelled.is_set()
            if not cancelled:
                self._async_wakeup = (loop, wakeup)
        if cancelled:
            self._raise_interrupted(RetryInterruptedError(self._name, self.attempt_count))

        sleep_task = asyncio.ensure_future(asyncio.sleep(interval))
        wakeup_task = asyncio.ensure_future(wakeup.wait())
        try:
            done, _ = await asyncio.wait(
                {sleep_task, wakeup_task}, return_when=asyncio.FIRST_COMPLETED
            )
        except asyncio.CancelledError as exc:
            self._raise_interrupted(exc)
        finally:
            sleep_task.cancel()
            wakeup_task.cancel()
            with self._lock:
                self._async_wakeup = None
        if wakeup_task in done:
            self._raise_interrupted(RetryInterruptedError(self._name, self.attempt_count))
        self._resume()

    def _record_failure(self, exception: BaseException) -> float:
        """Classify and count a failure.

        Returns:
            The wait in seconds before the next attempt.

        Raises:
            BaseException: ``exception`` when the call must stop.
        """
        if not self._config.exception_predicate(exception):
            with self._lock:
                self._state = RetryState.REJECTED
                attempts = self._attempt_count
            self._metrics.record_failure(retried=False)
            logger.debug(
                f"Retry '{self._name}' ignored non-retryable {type(exception).__name__}: {exception}"
            )
            self._publish(
                RetryEventType.IGNORED_ERROR,
                lambda: RetryOnIgnoredErrorEvent(self._name, attempts, exception),
            )
            raise exception

        with self._lock:
            self._last_failure = exception
            self._attempt_count += 1
            attempts = self._attempt_count
            exhausted = not self._config.is_infinite and attempts >= self._config.max_attempts
            self._state = RetryState.EXHAUSTED if exhausted else RetryState.WAITING

        if exhausted:
            self._metrics.record_failure(retried=True)
            log_structured(
                logger,
                logging.DEBUG,
                f"Retry '{self._name}' exhausted after {attempts} attempt(s): {exception!r}",
                retry_name=self._name,
                attempt=attempts,
            )
            self._publish(
                RetryEventType.ERROR,
                lambda: RetryOnErrorEvent(self._name, attempts, exception),
            )
            raise exception

        interval = self._config.interval_function(attempts)
        log_structured(
            logger,
            logging.DEBUG,
            f"Retry '{self._name}' waiting {interval:.2f}s before attempt {attempts + 1}",
            retry_name=self._name,
            attempt=attempts,
            wait_time=interval,
        )
        self._publish(
            RetryEventType.RETRY,
            lambda: RetryOnRetryEvent(self._name, attempts, exception, wait_interval=interval),
        )
        return interval

    def _resume(self) -> None:
        with self._lock:
            self._state = RetryState.ATTEMPTING

    def _raise_interrupted(self, cause: BaseException) -> NoReturn:
        with self._lock:
            self._interrupted = True
            attempts = self._attempt_count
            last_failure = self._last_failure

        if isinstance(cause, RetryInterruptedError):
            interruption = cause
        else:
            interruption = RetryInterruptedError(self._name, attempts)
            interruption.__cause__ = cause
        logger.warning(f"{interruption}; re-raising last failure {last_failure!r}")
        if last_failure is None:
            raise interruption
        raise last_failure from interruption

    def _publish(self, event_type: RetryEventType, event_factory: Callable[[], RetryEvent]) -> None:
        # Build the event only when somebody listens
        if self._publisher.has_consumers(event_type):
            self._publisher.publish(event_factory())
