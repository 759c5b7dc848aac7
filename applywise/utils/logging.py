"""Console logging for the applywise command line.

Tracker modules only create loggers with ``logging.getLogger(__name__)``;
they never attach handlers. ``configure_logging`` gives the ``applywise``
logger a single stderr handler so those records reach the terminal.
"""

import logging
import sys
from typing import TextIO

ROOT_LOGGER = "applywise"

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_HANDLER_NAME = "applywise-console"


def _console_handler(logger: logging.Logger) -> logging.StreamHandler | None:
    for handler in logger.handlers:
        if handler.get_name() == _HANDLER_NAME:
            return handler
    return None


def configure_logging(
    level: str = "INFO", stream: TextIO | None = None
) -> logging.Logger:
    """Send ``applywise.*`` records at or above ``level`` to ``stream``.

    Calling it again adjusts the existing handler rather than adding a
    second one, so a record is never printed twice.

    Args:
        level: Level name; unknown names fall back to INFO.
        stream: Output stream. Defaults to ``sys.stderr`` at call time.

    Returns:
        The ``applywise`` logger.
    """
    logger = logging.getLogger(ROOT_LOGGER)
    log_level = logging.getLevelNamesMapping().get(level.upper(), logging.INFO)

    handler = _console_handler(logger)
    if handler is None:
        handler = logging.StreamHandler(stream or sys.stderr)
        handler.set_name(_HANDLER_NAME)
        handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT))
        logger.addHandler(handler)
    elif stream is not None:
        handler.setStream(stream)

    handler.setLevel(log_level)
    logger.setLevel(log_level)
    logger.propagate = False
    return logger


def reset_logging() -> None:
    """Detach the console handler and let records propagate again."""
    logger = logging.getLogger(ROOT_LOGGER)
    handler = _console_handler(logger)
    if handler is not None:
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
