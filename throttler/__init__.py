"""Leaky-bucket request throttling over pluggable TTL storage."""

from throttler.config import (
    LeakyBucketConfig,
    LoggingConfig,
    ProviderAlgorithm,
    ProviderConfig,
    StorageBackend,
    StorageConfig,
    StorageOptions,
    ThrottlerConfig,
    load_config,
)
from throttler.errors import (
    CapacityExceededError,
    ConfigLoadError,
    ConfigurationError,
    ItemNotFoundError,
    ProviderError,
    StorageError,
    StorageNotBoundError,
    ThrottlerError,
)
from throttler.factory import (
    create_provider,
    create_storage,
    create_throttler,
    throttler_from_file,
)
from throttler.providers import Bucket, LeakyBucket, Provider, RatioFactor
from throttler.storage import InMemoryStorage, Storage
from throttler.throttler import Throttler

__all__ = [
    "Bucket",
    "CapacityExceededError",
    "ConfigLoadError",
    "ConfigurationError",
    "InMemoryStorage",
    "ItemNotFoundError",
    "LeakyBucket",
    "LeakyBucketConfig",
    "LoggingConfig",
    "Provider",
    "ProviderAlgorithm",
    "ProviderConfig",
    "ProviderError",
    "RatioFactor",
    "Storage",
    "StorageBackend",
    "StorageConfig",
    "StorageError",
    "StorageNotBoundError",
    "StorageOptions",
    "Throttler",
    "ThrottlerConfig",
    "ThrottlerError",
    "create_provider",
    "create_storage",
    "create_throttler",
    "load_config",
    "throttler_from_file",
]
