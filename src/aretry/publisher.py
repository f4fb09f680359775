r"""Listener registry and synchronous dispatch of retry events.

The ``EventPublisher`` keeps one ordered list of listeners per
``RetryEventType``. Listeners run on the publishing thread in registration
order, and a listener that raises is logged and skipped so it cannot
disturb the retry decision or the other listeners.
"""

from __future__ import annotations

__all__ = ["EventPublisher"]

import logging
import threading
from typing import TYPE_CHECKING

from aretry.events import RetryEventType

if TYPE_CHECKING:
    from collections.abc import Callable

    from aretry.events import (
        RetryEvent,
        RetryOnErrorEvent,
        RetryOnIgnoredErrorEvent,
        RetryOnRetryEvent,
        RetryOnSuccessEvent,
    )

logger: logging.Logger = logging.getLogger(__name__)


class EventPublisher:
    """Registry of per-event-type listeners.

    Registration methods return the publisher itself so calls can be
    chained. Registering the same listener twice for the same event type
    has no effect.

    Example:
        ```pycon
        >>> from aretry.events import RetryEventType, RetryOnErrorEvent
        >>> from aretry.publisher import EventPublisher
        >>> publisher = EventPublisher()
        >>> publisher.has_consumers()
        False
        >>> received = []
        >>> publisher = publisher.on_error(received.append).on_retry(received.append)
        >>> publisher.has_consumers(RetryEventType.ERROR)
        True
        >>> publisher.has_consumers(RetryEventType.SUCCESS)
        False
        >>> publisher.publish(RetryOnErrorEvent("backend", 3, ValueError("boom")))
        >>> len(received)
        1

        ```
    """

    def __init__(self) -> None:
        self._consumers: dict[RetryEventType, list[Callable[[RetryEvent], None]]] = {
            event_type: [] for event_type in RetryEventType
        }
        self._lock = threading.Lock()

    def has_consumers(self, event_type: RetryEventType | None = None) -> bool:
        """Check whether anybody listens.

        Args:
            event_type: The event type to check. If ``None``, check whether
                any listener is registered at all.

        Returns:
            ``True`` if at least one matching listener is registered.
        """
        with self._lock:
            if event_type is None:
                return any(self._consumers.values())
            return bool(self._consumers[event_type])

    def register(
        self, event_type: RetryEventType, listener: Callable[[RetryEvent], None]
    ) -> EventPublisher:
        """Register a listener for one event type.

        Args:
            event_type: The event type to listen to.
            listener: Callable receiving the event.

        Returns:
            The publisher, for chaining.
        """
        with self._lock:
            consumers = self._consumers[event_type]
            if listener not in consumers:
                consumers.append(listener)
        return self

    def on_success(self, listener: Callable[[RetryOnSuccessEvent], None]) -> EventPublisher:
        return self.register(RetryEventType.SUCCESS, listener)

    def on_retry(self, listener: Callable[[RetryOnRetryEvent], None]) -> EventPublisher:
        return self.register(RetryEventType.RETRY, listener)

    def on_error(self, listener: Callable[[RetryOnErrorEvent], None]) -> EventPublisher:
        return self.register(RetryEventType.ERROR, listener)

    def on_ignored_error(
        self, listener: Callable[[RetryOnIgnoredErrorEvent], None]
    ) -> EventPublisher:
        return self.register(RetryEventType.IGNORED_ERROR, listener)

    def on_event(self, listener: Callable[[RetryEvent], None]) -> EventPublisher:
        """Register a listener for every event type."""
        for event_type in RetryEventType:
            self.register(event_type, listener)
        return self

    def publish(self, event: RetryEvent) -> None:
        """Deliver an event to the listeners of its type.

        Args:
            event: The event to deliver.
        """
        with self._lock:
            consumers = tuple(self._consumers[event.event_type])
        for consumer in consumers:
            try:
                consumer(event)
            except Exception as e:  # noqa: BLE001
                logger.warning(
                    f"Error in retry '{event.retry_name}' {event.event_type.value} listener: {e}"
                )
