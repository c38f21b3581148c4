"""Logging configuration for dotstow.

Modules log through ``logging.getLogger(__name__)``; :func:`setup_logging`
routes those records to stderr through rich so they never interleave with the
result tables printed on stdout.
"""

from __future__ import annotations

import logging

from rich.console import Console
from rich.logging import RichHandler

LOG_FORMAT = "%(message)s"


def setup_logging(debug: bool = False, console: Console | None = None) -> None:
    """Configure the ``dotstow`` logger.

    Args:
        debug: Log at DEBUG instead of INFO and show source locations.
        console: Console to write to. Defaults to a fresh stderr console.
    """

    level = logging.DEBUG if debug else logging.INFO
    logger = logging.getLogger("dotstow")
    logger.setLevel(level)
    logger.handlers.clear()

    handler = RichHandler(
        console=console or Console(stderr=True),
        show_path=debug,
        show_time=debug,
        markup=False,
        rich_tracebacks=True,
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)

    logger.debug("Logging initialized (debug=%s)", debug)
