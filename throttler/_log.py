"""Logging for the throttler package.

Everything logs under the ``throttler`` logger, which writes to stderr and
does not propagate. Records render as ``LEVEL [tag] message`` where *tag* is
the logger name below ``throttler`` (``storage.memory``,
``providers.leaky_bucket``, ...).
"""

from __future__ import annotations

import logging
import sys
import threading

ROOT_LOGGER = "throttler"

_lock = threading.Lock()
_handler: logging.Handler | None = None


class _TagFormatter(logging.Formatter):
    def __init__(self) -> None:
        super().__init__("%(levelname)s [%(tag)s] %(message)s")

    def format(self, record: logging.LogRecord) -> str:
        record.tag = record.name.removeprefix(f"{ROOT_LOGGER}.")
        return super().format(record)


def setup_logging(verbose: bool = False, level: str | int | None = None) -> None:
    """Attach the stderr handler to the ``throttler`` logger once.

    *level* wins over *verbose*; without either the logger stays at WARNING.
    Later calls only change the level.
    """
    global _handler
    with _lock:
        logger = logging.getLogger(ROOT_LOGGER)
        if _handler is None:
            _handler = logging.StreamHandler(sys.stderr)
            _handler.setFormatter(_TagFormatter())
            logger.addHandler(_handler)
            logger.propagate = False
            logger.setLevel(logging.WARNING)
        if level is not None:
            logger.setLevel(level)
        elif verbose:
            logger.setLevel(logging.DEBUG)


def get_logger(name: str) -> logging.Logger:
    """Return the ``throttler.<name>`` logger, setting up the handler on first use."""
    if _handler is None:
        setup_logging()
    return logging.getLogger(f"{ROOT_LOGGER}.{name}")
