"""Logging configuration for the expense tracker.

All module loggers live under the ``components`` and ``restapi`` packages and
are routed to a single console handler.
"""

import logging

from components.core.config import Settings

LOGGER_NAMES = ("components", "restapi")


def setup_logging(settings: Settings) -> logging.Logger:
    """Set up application logging with a console handler.

    Args:
        settings: Application settings containing the log level.

    Returns:
        The root application logger.
    """
    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handler = logging.StreamHandler()
    handler.setLevel(settings.LOG_LEVEL)
    handler.setFormatter(formatter)

    for name in LOGGER_NAMES:
        logger = logging.getLogger(name)
        logger.setLevel(settings.LOG_LEVEL)
        # Clear any existing handlers (in case this is called multiple times)
        logger.handlers.clear()
        logger.addHandler(handler)

    return logging.getLogger(LOGGER_NAMES[0])
