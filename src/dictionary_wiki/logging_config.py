"""Logging configuration for the data dictionary wiki."""

import sys

from loguru import logger

_FORMAT = "{level.icon} {message}"
_VERBOSE_FORMAT = "<dim>{time:HH:mm:ss}</dim> {level.icon} <cyan>{name}</cyan> {message}"


def configure_logging(*, verbose: bool = False) -> None:
    """Send wiki logs to stderr; stdout stays free for command output and MCP stdio."""
    logger.remove()
    if verbose:
        logger.add(sys.stderr, level="DEBUG", format=_VERBOSE_FORMAT)
    else:
        logger.add(sys.stderr, level="INFO", format=_FORMAT)
