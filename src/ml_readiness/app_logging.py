"""
Application logging utilities.

Configures the ``ml_readiness`` logger with either a Rich console handler
(dev mode) or a plain stream handler. Modules log through
``logging.getLogger(__name__)`` and inherit whatever is set up here.
"""

import logging
import sys
from typing import Optional

from rich.console import Console
from rich.logging import RichHandler
from rich.theme import Theme


# Custom theme for log levels
_LOG_THEME = Theme({
    "logging.level.debug": "dim cyan",
    "logging.level.info": "green",
    "logging.level.warning": "yellow",
    "logging.level.error": "bold red",
    "logging.level.critical": "bold white on red",
    "log.time": "dim",
    "log.message": "default",
    "log.path": "dim",
})

_console = Console(theme=_LOG_THEME, stderr=True)

ROOT_LOGGER_NAME = 'ml_readiness'

DEFAULT_LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(
    level: str = 'WARNING',
    log_format: Optional[str] = None,
    dev_mode: bool = False,
    show_path: bool = True,
) -> logging.Logger:
    """
    Setup logging for the ml_readiness package.

    Calling this again replaces the previously installed handler, so the CLI
    can re-run it per invocation.

    Args:
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Format string for the plain handler. If None, uses default format.
        dev_mode: Whether to use rich console output (default: False)
        show_path: Whether to show file path in rich console logs (default: True)

    Returns:
        The configured package logger.
    """
    level_value = getattr(logging, level.upper())

    if dev_mode:
        handler: logging.Handler = RichHandler(
            console=_console,
            level=level_value,
            show_path=show_path,
            rich_tracebacks=True,
            markup=False,
        )
    else:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter(log_format or DEFAULT_LOG_FORMAT))
    handler.setLevel(level_value)

    logger = logging.getLogger(ROOT_LOGGER_NAME)
    logger.setLevel(level_value)
    for existing in list(logger.handlers):
        if not isinstance(existing, logging.NullHandler):
            logger.removeHandler(existing)
    logger.addHandler(handler)

    return logger


# Root package logger gets a NullHandler so library use stays quiet
logging.getLogger(ROOT_LOGGER_NAME).addHandler(logging.NullHandler())
