"""Storage abstractions and implementations."""

from throttler.storage.base import Storage
from throttler.storage.memory import InMemoryStorage, StorageItem

__all__ = [
    "InMemoryStorage",
    "Storage",
    "StorageItem",
]
