"""
Logging configuration for the PR Reviewer.

Every module logs through `get_logger(name)`, which tags records with
`logger_name` so review runs can be filtered per component.
"""

import sys
from typing import Optional

from loguru import logger

from src.config import settings

DEV_FORMAT = (
    "<green>{time:HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<cyan>{extra[logger_name]: <28}</cyan> | "
    "<level>{message}</level>"
)


def configure_logging(level: Optional[str] = None) -> None:
    """Install the stderr sink: colored text in development, JSON lines elsewhere."""
    logger.remove()

    log_level = (level or settings.log_level or ("DEBUG" if settings.debug else "INFO")).upper()

    if settings.environment == "development":
        logger.add(
            sys.stderr,
            format=DEV_FORMAT,
            level=log_level,
            colorize=True,
            backtrace=settings.debug,
            diagnose=settings.debug,
        )
    else:
        logger.add(sys.stderr, level=log_level, serialize=True)


logger.configure(extra={"logger_name": "reviewer"})
configure_logging()


def get_logger(name: Optional[str] = None):
    """Get a logger bound to a component name."""
    if name:
        return logger.bind(logger_name=name)
    return logger
