"""Tests for throttler logging: formatting, levels and the events modules emit."""

from __future__ import annotations

import logging
import threading

import pytest

from tests.conftest import make_provider, make_throttler
from throttler._log import ROOT_LOGGER, _TagFormatter, get_logger, setup_logging
from throttler.errors import CapacityExceededError
from throttler.factory import throttler_from_file
from throttler.storage.memory import InMemoryStorage


@pytest.fixture(autouse=True)
def _restore_level():
    root = logging.getLogger(ROOT_LOGGER)
    level = root.level
    yield
    root.setLevel(level)


def _messages(caplog, logger_name: str) -> list[str]:
    return [r.getMessage() for r in caplog.records if r.name == logger_name]


class TestFormatter:
    def test_renders_level_and_tag(self):
        record = logging.LogRecord(
            "throttler.storage.memory",
            logging.DEBUG,
            __file__,
            1,
            "Evicted expired item '%s'",
            ("foo",),
            None,
        )
        assert _TagFormatter().format(record) == "DEBUG [storage.memory] Evicted expired item 'foo'"

    def test_leaves_message_untouched(self):
        record = logging.LogRecord(
            "throttler.throttler", logging.WARNING, __file__, 1, "blocked", None, None
        )
        _TagFormatter().format(record)
        assert record.msg == "blocked"


class TestSetupLogging:
    def test_single_handler(self):
        root = logging.getLogger(ROOT_LOGGER)
        setup_logging()
        count = len(root.handlers)
        setup_logging(verbose=True)
        setup_logging(level="ERROR")
        assert len(root.handlers) == count
        assert root.propagate is False

    def test_verbose_enables_debug(self):
        setup_logging(verbose=True)
        assert logging.getLogger(ROOT_LOGGER).level == logging.DEBUG

    def test_level_wins_over_verbose(self):
        setup_logging(verbose=True, level="ERROR")
        assert logging.getLogger(ROOT_LOGGER).level == logging.ERROR

    def test_module_loggers_are_children(self):
        log = get_logger("providers.leaky_bucket")
        assert log.name == "throttler.providers.leaky_bucket"
        assert log.parent is logging.getLogger(ROOT_LOGGER)

    def test_file_log_level_applied(self, tmp_path):
        path = tmp_path / "throttler.yaml"
        path.write_text("logging:\n  level: DEBUG\n")
        throttler_from_file(path)
        assert logging.getLogger(ROOT_LOGGER).level == logging.DEBUG


@pytest.mark.usefixtures("_caplog_throttler")
class TestLogEvents:
    def test_eviction(self, caplog, clock):
        storage = InMemoryStorage({"ttl": 100})
        storage.set_item("foo", 1)
        clock.advance(0.5)
        with caplog.at_level("DEBUG", logger=ROOT_LOGGER):
            storage.has_item("foo")
        assert _messages(caplog, "throttler.storage.memory") == ["Evicted expired item 'foo'"]

    def test_purge(self, caplog, clock):
        storage = InMemoryStorage({"ttl": 100})
        storage.set_item("a", 1)
        storage.set_item("b", 2)
        clock.advance(0.5)
        with caplog.at_level("DEBUG", logger=ROOT_LOGGER):
            storage.purge_expired()
        assert _messages(caplog, "throttler.storage.memory") == ["Purged 2 expired item(s)"]

    def test_rejected_fill(self, caplog):
        provider = make_provider(10, 1)
        provider.increment_usage("foo", 10)
        with caplog.at_level("DEBUG", logger=ROOT_LOGGER):
            with pytest.raises(CapacityExceededError):
                provider.increment_usage("foo")
        assert _messages(caplog, "throttler.providers.leaky_bucket") == [
            "Rejected 1 drop(s) for 'foo' (usage 10/10)"
        ]

    def test_rejected_fill_silent_at_default_level(self, caplog):
        provider = make_provider(1, 1)
        provider.increment_usage("foo")
        with caplog.at_level("WARNING", logger=ROOT_LOGGER):
            with pytest.raises(CapacityExceededError):
                provider.increment_usage("foo")
        assert caplog.records == []

    def test_sleep_and_retry(self, caplog, clock):
        throttler = make_throttler(1, 1)
        throttler.throttle("foo")
        with caplog.at_level("DEBUG", logger=ROOT_LOGGER):
            throttler.throttle("foo", sleep=True)
        assert _messages(caplog, "throttler.throttler") == ["Waiting 1.000s before retrying 'foo'"]

    def test_timeout(self, caplog, clock):
        throttler = make_throttler(1, 0.01)
        throttler.throttle("foo")
        with caplog.at_level("DEBUG", logger=ROOT_LOGGER):
            throttler.throttle("foo", sleep=True, timeout=5)
        assert _messages(caplog, "throttler.throttler")[-1] == "Gave up waiting for 'foo' after 5s"

    def test_cancel(self, caplog):
        throttler = make_throttler(1, 0.001)
        throttler.throttle("foo")
        cancel = threading.Event()
        cancel.set()
        with caplog.at_level("DEBUG", logger=ROOT_LOGGER):
            throttler.throttle("foo", sleep=True, cancel=cancel)
        assert _messages(caplog, "throttler.throttler")[-1] == "Wait for 'foo' cancelled"
