"""
Shared helpers.
"""
import logging

from app.core import config


logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)-8s %(name)s: %(message)s",
)


def get_logger(name: str) -> logging.Logger:
    """Return a module logger configured with the service log level."""
    return logging.getLogger(name)
