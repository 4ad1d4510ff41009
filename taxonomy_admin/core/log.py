"""Logging configuration for the taxonomy admin backend.

Every module logs through ``logging.getLogger(__name__)``; this sets up the
shared ``taxonomy_admin`` parent logger with a console handler.
"""

import logging

from taxonomy_admin.core.config import Settings

LOGGER_NAME = "taxonomy_admin"


def setup_logging(settings: Settings) -> logging.Logger:
    """Configure the application logger.

    Args:
        settings: Application settings carrying ``log_level``.

    Returns:
        The configured ``taxonomy_admin`` logger.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(settings.log_level.upper())

    # Called again from tests and reloads; never stack handlers.
    logger.handlers.clear()

    handler = logging.StreamHandler()
    handler.setLevel(settings.log_level.upper())
    handler.setFormatter(
        logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    logger.addHandler(handler)
    return logger
