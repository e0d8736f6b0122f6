"""Rate-limiting algorithm abstractions and implementations."""

from throttler.providers.base import Provider, RatioFactor
from throttler.providers.leaky_bucket import Bucket, LeakyBucket

__all__ = [
    "Bucket",
    "LeakyBucket",
    "Provider",
    "RatioFactor",
]
