"""Process-local storage backend with lazy TTL eviction."""

from __future__ import annotations

import threading
import time
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from throttler._log import get_logger
from throttler.config import StorageOptions
from throttler.errors import ConfigurationError, ItemNotFoundError
from throttler.storage.base import Storage

logger = get_logger("storage.memory")


@dataclass
class StorageItem:
    value: Any
    timestamp: float  # time.monotonic() seconds


class InMemoryStorage(Storage):
    """Thread-safe dict-backed storage.

    Items are evicted when an accessor finds them expired; there is no
    background sweep. :meth:`purge_expired` can be called periodically to
    release memory held by keys that are never read again.
    """

    def __init__(self, options: Mapping[str, Any] | None = None) -> None:
        self._items: dict[str, StorageItem] = {}
        self._lock = threading.RLock()
        self._options = StorageOptions()
        if options:
            self.set_options(options)

    def set_options(self, options: Mapping[str, Any]) -> None:
        try:
            self._options = StorageOptions.model_validate(dict(options))
        except ValidationError as e:
            raise ConfigurationError(f"Invalid storage options: {e}") from e

    def get_options(self) -> dict[str, Any]:
        return self._options.model_dump()

    @property
    def ttl(self) -> int:
        """Item lifetime in milliseconds."""
        return self._options.ttl

    def _is_expired(self, item: StorageItem, now: float) -> bool:
        return (now - item.timestamp) * 1000 > self._options.ttl

    def _get_live(self, key: str) -> StorageItem | None:
        """Return the unexpired item for *key*, evicting it if it has expired."""
        item = self._items.get(key)
        if item is None:
            return None
        if self._is_expired(item, time.monotonic()):
            del self._items[key]
            logger.debug("Evicted expired item '%s'", key)
            return None
        return item

    def has_item(self, key: str) -> bool:
        with self._lock:
            return self._get_live(key) is not None

    def get_item(self, key: str, default: Any = None) -> Any:
        with self._lock:
            item = self._get_live(key)
            return default if item is None else item.value

    def set_item(self, key: str, value: Any) -> bool:
        with self._lock:
            current = self._get_live(key)
            if current is not None:
                current.value = value
            else:
                self._items[key] = StorageItem(value=value, timestamp=time.monotonic())
            return True

    def replace_item(self, key: str, value: Any) -> bool:
        with self._lock:
            if self._get_live(key) is None:
                raise ItemNotFoundError(key)
            self._items[key] = StorageItem(value=value, timestamp=time.monotonic())
            return True

    def touch_item(self, key: str) -> bool:
        with self._lock:
            current = self._get_live(key)
            if current is None:
                raise ItemNotFoundError(key)
            return self.replace_item(key, current.value)

    def remove_item(self, key: str) -> bool:
        with self._lock:
            if self._get_live(key) is None:
                raise ItemNotFoundError(key)
            del self._items[key]
            return True

    def purge_expired(self) -> int:
        """Evict every expired item and return how many were dropped."""
        with self._lock:
            now = time.monotonic()
            expired = [k for k, item in self._items.items() if self._is_expired(item, now)]
            for key in expired:
                del self._items[key]
        if expired:
            logger.debug("Purged %d expired item(s)", len(expired))
        return len(expired)

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
