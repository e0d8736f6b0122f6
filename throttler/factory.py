"""Factory functions for building throttlers from configuration."""

from __future__ import annotations

from pathlib import Path

from throttler._log import setup_logging
from throttler.config import (
    ProviderAlgorithm,
    ProviderConfig,
    StorageBackend,
    StorageConfig,
    ThrottlerConfig,
    load_config,
)
from throttler.errors import ConfigurationError
from throttler.providers.base import Provider
from throttler.providers.leaky_bucket import LeakyBucket
from throttler.storage.base import Storage
from throttler.storage.memory import InMemoryStorage
from throttler.throttler import Throttler


def create_storage(config: StorageConfig | None = None) -> Storage:
    """Create a Storage for the configured backend."""
    config = config or StorageConfig()
    if config.backend == StorageBackend.MEMORY:
        return InMemoryStorage(config.options.model_dump())
    raise ConfigurationError(f"Unsupported storage backend '{config.backend}'")


def create_provider(
    config: ProviderConfig | None = None, storage: Storage | None = None
) -> Provider:
    """Create a Provider for the configured algorithm, optionally bound to *storage*."""
    config = config or ProviderConfig()
    if config.algorithm == ProviderAlgorithm.LEAKY_BUCKET:
        return LeakyBucket.from_config(config.leaky_bucket, storage)
    raise ConfigurationError(f"Unsupported provider algorithm '{config.algorithm}'")


def create_throttler(config: ThrottlerConfig | None = None) -> Throttler:
    """Wire one storage, one provider and one throttler together."""
    config = config or ThrottlerConfig()
    storage = create_storage(config.storage)
    return Throttler(create_provider(config.provider), storage)


def throttler_from_file(path: Path) -> Throttler:
    """Load a YAML configuration file, apply its log level and build a throttler."""
    config = load_config(path)
    setup_logging(level=config.logging.level)
    return create_throttler(config)
