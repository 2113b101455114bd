"""Logging utilities."""

import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler


PACKAGE_LOGGER = "labdriver"
DEFAULT_LEVEL = "WARNING"
_HANDLER_NAME = "labdriver-console"


def resolve_log_level(cli_level: Optional[str], lab_level: Optional[str] = None) -> str:
    """Pick the effective level, an explicit command-line level wins."""
    return (cli_level or lab_level or DEFAULT_LEVEL).upper()


def setup_logging(level: str = DEFAULT_LEVEL) -> logging.Logger:
    """Route labdriver logs to stderr and set their level.

    Safe to call again, later calls only change the level.
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(getattr(logging, level.upper(), logging.WARNING))

    if not any(h.get_name() == _HANDLER_NAME for h in logger.handlers):
        handler = RichHandler(console=Console(stderr=True), show_path=False)
        handler.set_name(_HANDLER_NAME)
        logger.addHandler(handler)

    return logger
