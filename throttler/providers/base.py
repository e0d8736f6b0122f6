"""Abstract interface for rate-limiting algorithms."""

from __future__ import annotations

import abc
from enum import Enum

from throttler.storage.base import Storage


class RatioFactor(float, Enum):
    """Multipliers converting a per-second rate into a per-period count."""

    BY_HOUR = 3600.0
    BY_MINUTE = 60.0
    BY_SECOND = 1.0
    BY_MILLISECOND = 0.001


class Provider(abc.ABC):
    """A rate-limiting algorithm bound to a :class:`Storage`.

    Every operation is keyed by a *namespace*, an opaque non-empty string
    identifying one independent limit (an API key, a tenant id, ...).
    Operations that need stored state raise ``StorageNotBoundError`` until
    :meth:`set_storage` has been called.
    """

    @abc.abstractmethod
    def set_storage(self, storage: Storage) -> None: ...

    @abc.abstractmethod
    def get_storage(self) -> Storage: ...

    @abc.abstractmethod
    def increment_usage(self, namespace: str, count: int = 1) -> int:
        """Consume *count* units and return the new usage."""
        ...

    @abc.abstractmethod
    def get_ratio(self, namespace: str, factor: float = RatioFactor.BY_SECOND) -> int:
        """Return the number of requests permitted per *factor* seconds."""
        ...

    @abc.abstractmethod
    def get_usage(self, namespace: str) -> int: ...

    @abc.abstractmethod
    def get_limit(self, namespace: str) -> int: ...

    @abc.abstractmethod
    def has_limit(self, namespace: str) -> bool:
        """Return True when at least one more unit can be consumed."""
        ...

    @abc.abstractmethod
    def get_remaining(self, namespace: str) -> int: ...

    @abc.abstractmethod
    def get_estimate(self, namespace: str, count: int = 1) -> int:
        """Return the milliseconds to wait before *count* more units fit.

        Zero when they fit now. With the default *count* this is the wait for
        the next single request.
        """
        ...

    @abc.abstractmethod
    def get_reset(self, namespace: str) -> int:
        """Return the milliseconds until usage is back to zero."""
        ...
