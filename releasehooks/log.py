"""Logging setup: stdlib loggers rendered through rich."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

LOGGER_NAME = "releasehooks"


def setup_logging(verbose: bool = False, console: Optional[Console] = None) -> logging.Logger:
    """Attach a RichHandler to the package logger.

    Safe to call more than once; the level is updated and no second
    handler is added.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if verbose else logging.INFO)

    if not any(isinstance(h, RichHandler) for h in logger.handlers):
        handler = RichHandler(
            console=console or Console(stderr=True),
            show_path=verbose,
            rich_tracebacks=True,
            markup=False,
        )
        handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
        logger.addHandler(handler)

    return logger
