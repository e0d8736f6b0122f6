"""Configuration models for providers, storage backends and the throttler.

Every model carries documented fallback defaults; there is no other
process-wide configuration state.
"""

from __future__ import annotations

from enum import StrEnum
from pathlib import Path
from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

from throttler._yaml import load_yaml_model
from throttler.errors import ConfigLoadError

DEFAULT_CAPACITY = 10
DEFAULT_LEAK_RATE = 1.0
DEFAULT_TTL = 300_000  # 5 minutes in milliseconds


class StorageBackend(StrEnum):
    MEMORY = "memory"


class ProviderAlgorithm(StrEnum):
    LEAKY_BUCKET = "leaky_bucket"


class StorageOptions(BaseModel):
    """Options understood by storage backends. Unknown keys are dropped."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    ttl: Annotated[int, Field(ge=0)] = DEFAULT_TTL


class StorageConfig(BaseModel):
    backend: StorageBackend = StorageBackend.MEMORY
    options: StorageOptions = StorageOptions()


class LeakyBucketConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    capacity: Annotated[int, Field(gt=0)] = DEFAULT_CAPACITY
    leak_rate: Annotated[float, Field(gt=0, allow_inf_nan=False)] = DEFAULT_LEAK_RATE


class ProviderConfig(BaseModel):
    algorithm: ProviderAlgorithm = ProviderAlgorithm.LEAKY_BUCKET
    leaky_bucket: LeakyBucketConfig = LeakyBucketConfig()


class LoggingConfig(BaseModel):
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "WARNING"


class ThrottlerConfig(BaseModel):
    provider: ProviderConfig = ProviderConfig()
    storage: StorageConfig = StorageConfig()
    logging: LoggingConfig = LoggingConfig()


def load_config(path: Path) -> ThrottlerConfig:
    """Read a YAML file and validate it as a ThrottlerConfig."""
    return load_yaml_model(path, ThrottlerConfig, ConfigLoadError)
