r"""Registry of named retry instances.

The registry hands out one ``Retry`` per name, so that every component
asking for ``"payments"`` shares the same counters and listeners.
"""

from __future__ import annotations

__all__ = ["RetryRegistry"]

import logging
import threading

from aretry.config import RetryConfig
from aretry.retry import Retry

logger: logging.Logger = logging.getLogger(__name__)


class RetryRegistry:
    """Thread-safe get-or-create store of retry instances.

    Args:
        default_config: Config used for instances created without an
            explicit one. Defaults to ``RetryConfig()``.

    Example:
        ```pycon
        >>> from aretry import RetryConfig, RetryRegistry
        >>> registry = RetryRegistry(RetryConfig(max_attempts=5))
        >>> payments = registry.retry("payments")
        >>> payments.config.max_attempts
        5
        >>> registry.retry("payments") is payments
        True
        >>> "payments" in registry
        True

        ```
    """

    def __init__(self, default_config: RetryConfig | None = None) -> None:
        self._default_config = default_config if default_config is not None else RetryConfig()
        self._retries: dict[str, Retry] = {}
        self._lock = threading.Lock()

    @property
    def default_config(self) -> RetryConfig:
        return self._default_config

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._retries

    def __len__(self) -> int:
        with self._lock:
            return len(self._retries)

    def retry(self, name: str, config: RetryConfig | None = None) -> Retry:
        """Return the instance registered under ``name``, creating it if needed.

        Args:
            name: The instance name.
            config: Config for a newly created instance. Ignored when the
                instance already exists.

        Returns:
            The registered retry instance.
        """
        with self._lock:
            retry = self._retries.get(name)
            if retry is None:
                retry = Retry(name, config if config is not None else self._default_config)
                self._retries[name] = retry
                logger.debug(f"Registered retry '{name}'")
            elif config is not None and config is not retry.config:
                logger.debug(f"Retry '{name}' already registered, ignoring the given config")
            return retry

    def find(self, name: str) -> Retry | None:
        with self._lock:
            return self._retries.get(name)

    def remove(self, name: str) -> Retry | None:
        """Unregister and return the instance named ``name``, if any."""
        with self._lock:
            return self._retries.pop(name, None)

    def all_retries(self) -> tuple[Retry, ...]:
        """Return the registered instances in registration order."""
        with self._lock:
            return tuple(self._retries.values())
