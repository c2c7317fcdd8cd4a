"""Progress reporting shared by the version resolver and the scaffolder."""

from __future__ import annotations

import logging
import sys
from typing import Protocol, runtime_checkable

__all__ = ["LoggingProgressLogger", "ProgressLogger", "configure_logging"]


LOGGER = logging.getLogger("pkgforge")


@runtime_checkable
class ProgressLogger(Protocol):
    """Sink for the notifications emitted while a package is generated."""

    def process(self, message: str) -> None:
        """Announce the start of a generation step."""

    def verbose_info(self, message: str) -> None:
        """Report a detail that only matters in verbose mode."""


class LoggingProgressLogger:
    """:class:`ProgressLogger` backed by the standard :mod:`logging` module."""

    def __init__(self, logger: logging.Logger | None = None) -> None:
        self._logger = logger or LOGGER

    def process(self, message: str) -> None:
        self._logger.info(message)

    def verbose_info(self, message: str) -> None:
        self._logger.debug(message)


def configure_logging(verbose: bool = False) -> None:
    """Send generator messages to stderr; details only when ``verbose`` is set."""

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter("%(message)s"))

    LOGGER.handlers.clear()
    LOGGER.addHandler(handler)
    LOGGER.setLevel(logging.DEBUG if verbose else logging.INFO)
    LOGGER.propagate = False
