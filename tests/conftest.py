from __future__ import annotations

from typing import TYPE_CHECKING
from unittest.mock import Mock, patch

import pytest

from aretry import Retry, RetryConfig
from aretry.backoff import LinearBackoff

if TYPE_CHECKING:
    from collections.abc import Generator


@pytest.fixture
def sleeps() -> list[float]:
    """Record the waits requested by a retry instance instead of
    sleeping."""
    return []


@pytest.fixture
def mock_asleep() -> Generator[Mock, None, None]:
    """Patch asyncio.sleep to make tests run faster."""
    with patch("asyncio.sleep", return_value=None) as mock:
        yield mock


@pytest.fixture
def config() -> RetryConfig:
    """Create a config with 3 attempts and a linear 1s, 2s, ... backoff."""
    return RetryConfig(max_attempts=3, interval_function=LinearBackoff(base_delay=1.0))


@pytest.fixture
def retry(config: RetryConfig, sleeps: list[float]) -> Retry:
    """Create a retry instance whose waits are recorded in ``sleeps``."""
    return Retry("test", config, sleep_func=sleeps.append)


@pytest.fixture
def events() -> list:
    """Collect published events in order."""
    return []
