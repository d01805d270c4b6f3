from __future__ import annotations
import logging
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler

from .config import get_settings

PACKAGE_LOGGER = "sqlite_doc_engine"

logging.getLogger(PACKAGE_LOGGER).addHandler(logging.NullHandler())


def configure_logging(level: Optional[int | str] = None, console: Optional[Console] = None) -> logging.Logger:
    """
    Attach a RichHandler to the package logger. Calling it again replaces
    the previously installed handler instead of stacking a second one.
    """
    if level is None:
        level = get_settings().log_level_value
    logger = logging.getLogger(PACKAGE_LOGGER)
    for h in list(logger.handlers):
        if isinstance(h, RichHandler):
            logger.removeHandler(h)
    handler = RichHandler(console=console, show_path=False, rich_tracebacks=True)
    handler.setFormatter(logging.Formatter("%(name)s: %(message)s"))
    logger.addHandler(handler)
    logger.setLevel(level)
    return logger
