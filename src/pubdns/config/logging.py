"""Shared logging helpers."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Set up the root logger for the ``pubdns`` command.

    Records go to stderr with a clock time and the logger name, so query
    output on stdout stays tab separated. ``force`` replaces handlers that
    an earlier call or a test runner already installed.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
