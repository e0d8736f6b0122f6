"""Throttle decisions on top of a rate-limiting provider."""

from __future__ import annotations

import threading
import time

from throttler._log import get_logger
from throttler.errors import CapacityExceededError
from throttler.providers.base import Provider, RatioFactor
from throttler.storage.base import Storage

logger = get_logger("throttler")


class Throttler:
    """Answers "may this request run now?" for a namespace.

    ``throttle()`` returns ``False`` when the request is allowed and its usage
    has been recorded, ``True`` when it is blocked.
    """

    def __init__(self, provider: Provider, storage: Storage | None = None) -> None:
        self._provider = provider
        if storage is not None:
            self._provider.set_storage(storage)

    @property
    def provider(self) -> Provider:
        return self._provider

    def throttle(
        self,
        namespace: str,
        sleep: bool = False,
        increment: int = 1,
        *,
        timeout: float | None = None,
        cancel: threading.Event | None = None,
    ) -> bool:
        """Try to consume *increment* units for *namespace*.

        With *sleep* the calling thread waits for the provider's estimate and
        retries until the request fits, *timeout* seconds have passed, or
        *cancel* is set; the last two return ``True`` (blocked).
        """
        limit = self._provider.get_limit(namespace)
        if increment > limit:
            logger.warning(
                "Increment %d for '%s' exceeds the limit %d and can never be allowed",
                increment,
                namespace,
                limit,
            )
            return True

        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._try_acquire(namespace, increment):
                return False
            if not sleep:
                return True

            wait = self._provider.get_estimate(namespace, increment) / 1000
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    logger.debug("Gave up waiting for '%s' after %ss", namespace, timeout)
                    return True
                wait = min(wait, remaining)

            logger.debug("Waiting %.3fs before retrying '%s'", wait, namespace)
            if cancel is not None:
                if cancel.wait(wait):
                    logger.debug("Wait for '%s' cancelled", namespace)
                    return True
            else:
                time.sleep(wait)

    def _try_acquire(self, namespace: str, increment: int) -> bool:
        if not self._provider.has_limit(namespace):
            return False
        try:
            self._provider.increment_usage(namespace, increment)
        except CapacityExceededError:
            return False
        return True

    def get_ratio(self, namespace: str, factor: float = RatioFactor.BY_SECOND) -> int:
        """Requests permitted per *factor* seconds."""
        return self._provider.get_ratio(namespace, factor)

    def get_usage(self, namespace: str) -> int:
        """Units currently held in the namespace."""
        return self._provider.get_usage(namespace)

    def get_limit(self, namespace: str) -> int:
        """Maximum units the namespace may hold."""
        return self._provider.get_limit(namespace)

    def has_limit(self, namespace: str) -> bool:
        """Whether at least one more unit fits now."""
        return self._provider.has_limit(namespace)

    def get_remaining(self, namespace: str) -> int:
        """Units that still fit now."""
        return self._provider.get_remaining(namespace)

    def get_estimate(self, namespace: str, count: int = 1) -> int:
        """Milliseconds until *count* more units fit."""
        return self._provider.get_estimate(namespace, count)

    def get_reset(self, namespace: str) -> int:
        """Milliseconds until the namespace's usage drains to zero."""
        return self._provider.get_reset(namespace)
