"""Stderr logging setup for command-line runs."""

from __future__ import annotations

from contextlib import contextmanager
import logging
import sys
from typing import Iterator

LOG_FORMAT = "%(levelname)s %(threadName)s %(name)s: %(message)s"


@contextmanager
def stderr_logging(level: int = logging.WARNING) -> Iterator[logging.Handler]:
    """Route log records to stderr for the duration of the block."""
    root = logging.getLogger()
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    previous_level = root.level
    root.addHandler(handler)
    root.setLevel(level)
    try:
        yield handler
    finally:
        root.removeHandler(handler)
        root.setLevel(previous_level)
