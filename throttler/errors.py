"""Exception hierarchy shared by providers, storage backends and the throttler."""

from __future__ import annotations


class ThrottlerError(Exception):
    """Base class for every failure raised by the throttler package."""


class ProviderError(ThrottlerError):
    """Raised by rate-limiting algorithms."""


class ConfigurationError(ProviderError, ValueError):
    """Raised when a provider or storage is built from invalid parameters."""


class StorageNotBoundError(ProviderError):
    """Raised when a provider operation needs a storage that was never attached."""

    def __init__(self, message: str = "No storage has been attached to the provider") -> None:
        super().__init__(message)


class CapacityExceededError(ProviderError):
    """Raised when filling a bucket would push it over its capacity.

    The bucket's leaked state is still persisted; only the fill is rejected.
    """

    def __init__(self, namespace: str, usage: int, requested: int, capacity: int) -> None:
        self.namespace = namespace
        self.usage = usage
        self.requested = requested
        self.capacity = capacity
        super().__init__(
            f"Bucket '{namespace}' cannot take {requested} drop(s): "
            f"usage {usage} of capacity {capacity}"
        )


class StorageError(ThrottlerError):
    """Raised by storage backends."""


class ItemNotFoundError(StorageError, KeyError):
    """Raised when replace/touch/remove targets an absent or expired key."""

    def __init__(self, key: str) -> None:
        self.key = key
        super().__init__(f"Storage item '{key}' does not exist or has expired")

    def __str__(self) -> str:
        # KeyError.__str__ would repr() the message
        return str(self.args[0])


class ConfigLoadError(ThrottlerError):
    """Raised when a throttler configuration file cannot be loaded or validated."""
