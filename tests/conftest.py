"""Shared test fixtures and helpers."""

from __future__ import annotations

import logging

import pytest

from throttler.providers.leaky_bucket import LeakyBucket
from throttler.storage.memory import InMemoryStorage
from throttler.throttler import Throttler


class FakeClock:
    """Stand-in for the ``time`` module: ``sleep`` advances ``monotonic``."""

    def __init__(self, start: float = 1000.0) -> None:
        self.now = start
        self.sleeps: list[float] = []

    def monotonic(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds

    def advance(self, seconds: float) -> None:
        self.now += seconds


def make_provider(capacity: int = 10, leak_rate: float = 1.0) -> LeakyBucket:
    """Build a LeakyBucket bound to a fresh InMemoryStorage."""
    return LeakyBucket(capacity, leak_rate, InMemoryStorage())


def make_throttler(capacity: int = 10, leak_rate: float = 1.0) -> Throttler:
    """Build a Throttler over a LeakyBucket and a fresh InMemoryStorage."""
    return Throttler(LeakyBucket(capacity, leak_rate), InMemoryStorage())


@pytest.fixture
def clock(monkeypatch):
    """Drive every module's ``time`` from one controllable clock."""
    fake = FakeClock()
    monkeypatch.setattr("throttler.providers.leaky_bucket.time", fake)
    monkeypatch.setattr("throttler.storage.memory.time", fake)
    monkeypatch.setattr("throttler.throttler.time", fake)
    return fake


@pytest.fixture()
def _caplog_throttler(caplog):
    """Attach caplog handler to the ``throttler`` logger so records are captured
    even though ``propagate=False``."""
    root = logging.getLogger("throttler")
    root.addHandler(caplog.handler)
    yield
    root.removeHandler(caplog.handler)
