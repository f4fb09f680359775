r"""Unit tests for EventPublisher."""

from __future__ import annotations

import logging
import threading
from unittest.mock import Mock

import pytest

from aretry.events import (
    RetryEventType,
    RetryOnErrorEvent,
    RetryOnIgnoredErrorEvent,
    RetryOnRetryEvent,
    RetryOnSuccessEvent,
)
from aretry.publisher import EventPublisher

####################################
#     Tests for EventPublisher     #
####################################


def test_event_publisher_has_no_consumers_initially() -> None:
    """Test that a new publisher has no listeners."""
    publisher = EventPublisher()
    assert not publisher.has_consumers()
    for event_type in RetryEventType:
        assert not publisher.has_consumers(event_type)


@pytest.mark.parametrize(
    ("method", "event_type"),
    [
        ("on_success", RetryEventType.SUCCESS),
        ("on_retry", RetryEventType.RETRY),
        ("on_error", RetryEventType.ERROR),
        ("on_ignored_error", RetryEventType.IGNORED_ERROR),
    ],
)
def test_event_publisher_register_per_kind(method: str, event_type: RetryEventType) -> None:
    """Test that each registration method targets one event type."""
    publisher = EventPublisher()
    assert getattr(publisher, method)(Mock()) is publisher
    assert publisher.has_consumers()
    assert publisher.has_consumers(event_type)
    assert [t for t in RetryEventType if publisher.has_consumers(t)] == [event_type]


def test_event_publisher_chaining() -> None:
    """Test that registrations can be chained."""
    publisher = EventPublisher()
    publisher.on_retry(Mock()).on_error(Mock()).on_success(Mock())
    assert publisher.has_consumers(RetryEventType.RETRY)
    assert publisher.has_consumers(RetryEventType.ERROR)
    assert publisher.has_consumers(RetryEventType.SUCCESS)
    assert not publisher.has_consumers(RetryEventType.IGNORED_ERROR)


def test_event_publisher_on_event_registers_all_kinds() -> None:
    """Test that on_event listens to every event type."""
    received = []
    publisher = EventPublisher().on_event(received.append)
    events = [
        RetryOnSuccessEvent("test", 1, None),
        RetryOnRetryEvent("test", 1, None, wait_interval=0.1),
        RetryOnErrorEvent("test", 3, None),
        RetryOnIgnoredErrorEvent("test", last_failure=None),
    ]
    for event in events:
        publisher.publish(event)
    assert received == events


def test_event_publisher_publish_dispatches_by_type() -> None:
    """Test that only listeners of the event's type are called."""
    on_retry, on_error = Mock(), Mock()
    publisher = EventPublisher().on_retry(on_retry).on_error(on_error)
    event = RetryOnErrorEvent("test", 3, ValueError())
    publisher.publish(event)
    on_error.assert_called_once_with(event)
    on_retry.assert_not_called()


def test_event_publisher_registration_order() -> None:
    """Test that listeners run in registration order."""
    order = []
    publisher = EventPublisher()
    for index in range(5):
        publisher.on_retry(lambda event, index=index: order.append(index))
    publisher.publish(RetryOnRetryEvent("test", 1, None, wait_interval=0.0))
    assert order == [0, 1, 2, 3, 4]


def test_event_publisher_register_is_idempotent() -> None:
    """Test that registering a listener twice calls it once."""
    listener = Mock()
    publisher = EventPublisher().on_error(listener).on_error(listener)
    publisher.publish(RetryOnErrorEvent("test", 3, None))
    listener.assert_called_once()


def test_event_publisher_same_listener_for_several_kinds() -> None:
    """Test that one listener can be registered for several types."""
    listener = Mock()
    publisher = EventPublisher().on_error(listener).on_retry(listener)
    publisher.publish(RetryOnErrorEvent("test", 3, None))
    publisher.publish(RetryOnRetryEvent("test", 1, None, wait_interval=0.0))
    assert listener.call_count == 2


def test_event_publisher_publish_without_consumers() -> None:
    """Test that publishing without listeners is a no-op."""
    EventPublisher().publish(RetryOnErrorEvent("test", 3, None))


def test_event_publisher_isolates_listener_failures(caplog: pytest.LogCaptureFixture) -> None:
    """Test that a failing listener neither propagates nor stops the
    others."""
    failing = Mock(side_effect=RuntimeError("listener bug"))
    healthy = Mock()
    publisher = EventPublisher().on_error(failing).on_error(healthy)
    event = RetryOnErrorEvent("backend", 3, ValueError())

    with caplog.at_level(logging.WARNING, logger="aretry.publisher"):
        publisher.publish(event)

    failing.assert_called_once_with(event)
    healthy.assert_called_once_with(event)
    assert "Error in retry 'backend' error listener: listener bug" in caplog.text


def test_event_publisher_concurrent_registration() -> None:
    """Test that concurrent registrations are not lost."""
    publisher = EventPublisher()
    listeners = [Mock() for _ in range(50)]
    threads = [threading.Thread(target=publisher.on_retry, args=(listener,)) for listener in listeners]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    publisher.publish(RetryOnRetryEvent("test", 1, None, wait_interval=0.0))
    for listener in listeners:
        listener.assert_called_once()
