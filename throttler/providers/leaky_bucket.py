"""Leaky-bucket rate limiting over a pluggable storage backend.

Each namespace owns one bucket ``{drops, timestamp}``. Drops drain at
``leak_rate`` per second; draining is computed lazily from the elapsed
monotonic time whenever the bucket is read or filled, and the drained state
is written back so later reads continue from the same timeline.
"""

from __future__ import annotations

import math
import threading
import time
import weakref
from typing import Annotated

from pydantic import BaseModel, Field, ValidationError

from throttler._log import get_logger
from throttler.config import DEFAULT_CAPACITY, DEFAULT_LEAK_RATE, LeakyBucketConfig
from throttler.errors import (
    CapacityExceededError,
    ConfigurationError,
    ItemNotFoundError,
    ProviderError,
    StorageNotBoundError,
)
from throttler.providers.base import Provider, RatioFactor
from throttler.storage.base import Storage

logger = get_logger("providers.leaky_bucket")


class Bucket(BaseModel):
    drops: Annotated[int, Field(ge=0)] = 0
    timestamp: float  # time.monotonic() seconds


def _ceil(value: float) -> int:
    """Ceil that ignores binary float noise (``3 / 0.1 == 30.000000000000004``)."""
    return math.ceil(round(value, 9))


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def _check_namespace(namespace: str) -> None:
    if not namespace:
        raise ValueError("namespace must be a non-empty string")


class LeakyBucket(Provider):
    """Leaky-bucket provider.

    Args:
        capacity: Maximum drops a bucket may hold.
        leak_rate: Drops drained per second.
        storage: Optional backend; can also be attached later with
            :meth:`set_storage`.

    Raises:
        ConfigurationError: *capacity* or *leak_rate* is not positive.
    """

    def __init__(
        self,
        capacity: int = DEFAULT_CAPACITY,
        leak_rate: float = DEFAULT_LEAK_RATE,
        storage: Storage | None = None,
    ) -> None:
        try:
            self._config = LeakyBucketConfig(capacity=capacity, leak_rate=leak_rate)
        except ValidationError as e:
            raise ConfigurationError(f"Invalid leaky bucket settings: {e}") from e

        self._storage: Storage | None = None
        # One lock per namespace, dropped once no caller holds it; the guard
        # only protects the table itself.
        self._locks: weakref.WeakValueDictionary[str, threading.RLock] = (
            weakref.WeakValueDictionary()
        )
        self._locks_guard = threading.Lock()

        if storage is not None:
            self.set_storage(storage)

    @classmethod
    def from_config(cls, config: LeakyBucketConfig, storage: Storage | None = None) -> LeakyBucket:
        return cls(config.capacity, config.leak_rate, storage)

    @property
    def capacity(self) -> int:
        return self._config.capacity

    @property
    def leak_rate(self) -> float:
        return self._config.leak_rate

    # -- storage -------------------------------------------------------------

    def set_storage(self, storage: Storage) -> None:
        self._storage = storage

    def get_storage(self) -> Storage:
        if self._storage is None:
            raise StorageNotBoundError()
        return self._storage

    # -- provider operations -------------------------------------------------

    def increment_usage(self, namespace: str, count: int = 1) -> int:
        _check_namespace(namespace)
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")

        with self._lock_for(namespace):
            bucket = self._load(namespace)
            candidate = bucket.drops + count

            if candidate > self.capacity:
                self._save(namespace, bucket)
                logger.debug(
                    "Rejected %d drop(s) for '%s' (usage %d/%d)",
                    count,
                    namespace,
                    bucket.drops,
                    self.capacity,
                )
                raise CapacityExceededError(namespace, bucket.drops, count, self.capacity)

            filled = Bucket(drops=candidate, timestamp=time.monotonic())
            self._save(namespace, filled)
            return filled.drops

    def get_ratio(self, namespace: str, factor: float = RatioFactor.BY_SECOND) -> int:
        _check_namespace(namespace)
        if factor <= 0:
            raise ValueError(f"ratio factor must be positive, got {factor}")
        return _ceil(self.leak_rate * factor)

    def get_usage(self, namespace: str) -> int:
        _check_namespace(namespace)
        with self._lock_for(namespace):
            bucket = self._load(namespace)
            self._save(namespace, bucket)
            return bucket.drops

    def get_limit(self, namespace: str) -> int:
        _check_namespace(namespace)
        return self.capacity

    def has_limit(self, namespace: str) -> bool:
        return self.get_remaining(namespace) > 0

    def get_remaining(self, namespace: str) -> int:
        return self.get_limit(namespace) - self.get_usage(namespace)

    def get_estimate(self, namespace: str, count: int = 1) -> int:
        if count < 1:
            raise ValueError(f"count must be at least 1, got {count}")
        # Drops that must leak before *count* more fit; one drain interval
        # covers them all.
        overflow = self.get_usage(namespace) + count - self.capacity
        if overflow <= 0:
            return 0
        return _ceil(overflow * 1000 / self.leak_rate)

    def get_reset(self, namespace: str) -> int:
        drops = self.get_usage(namespace)
        if drops > 0:
            return _ceil(drops / self.leak_rate) * 1000
        return 0

    # -- bucket state --------------------------------------------------------

    def _lock_for(self, namespace: str) -> threading.RLock:
        with self._locks_guard:
            lock = self._locks.get(namespace)
            if lock is None:
                lock = self._locks[namespace] = threading.RLock()
            return lock

    def _load(self, namespace: str) -> Bucket:
        """Return the bucket for *namespace* with pending leakage applied."""
        raw = self.get_storage().get_item(namespace)
        now = time.monotonic()
        if raw is None:
            return Bucket(drops=0, timestamp=now)
        try:
            bucket = Bucket.model_validate_json(raw)
        except ValidationError as e:
            raise ProviderError(f"Stored bucket for '{namespace}' is not readable") from e
        return self._leak(bucket, now)

    def _leak(self, bucket: Bucket, now: float) -> Bucket:
        elapsed = max(0.0, now - bucket.timestamp)
        leakage = _round_half_up(elapsed * self.leak_rate)
        drops = bucket.drops - leakage if leakage <= bucket.drops else 0
        return Bucket(drops=drops, timestamp=now)

    def _save(self, namespace: str, bucket: Bucket) -> bool:
        # Active buckets get their storage TTL refreshed; new ones are inserted.
        storage = self.get_storage()
        payload = bucket.model_dump_json()
        try:
            return storage.replace_item(namespace, payload)
        except ItemNotFoundError:
            return storage.set_item(namespace, payload)
