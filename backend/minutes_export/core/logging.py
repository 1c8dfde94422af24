"""Logging helpers shared by the API and the document converters."""
from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import Iterable, Iterator

LOG_FORMAT = "%(levelname)s %(name)s %(message)s"


def configure_logging(level: str | int = logging.INFO) -> None:
    """Configure the root logger once for the whole process."""

    logging.basicConfig(level=level, format=LOG_FORMAT)


@contextmanager
def suppress_loggers(names: Iterable[str], level: int = logging.ERROR) -> Iterator[None]:
    """Raise the level of the given loggers for the duration of the block.

    Only the named loggers are touched and their previous levels are restored
    on exit, even when the block raises.
    """

    previous: list[tuple[logging.Logger, int]] = []
    for name in names:
        target = logging.getLogger(name)
        previous.append((target, target.level))
        target.setLevel(level)
    try:
        yield
    finally:
        for target, old_level in reversed(previous):
            target.setLevel(old_level)


__all__ = ["LOG_FORMAT", "configure_logging", "suppress_loggers"]
