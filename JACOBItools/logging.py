"""
JACOBItools: Logging

Package level logger helpers. Every logger lives under the ``JACOBItools``
namespace and is silent until the user configures it.

    >>> from JACOBItools.logging import configure_logging
    >>> configure_logging("DEBUG")

Author: James R. Beattie

"""

import logging
import sys
from contextlib import contextmanager
from typing import Optional, Union

LOGGER_NAME = "JACOBItools"
DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def get_logger(
    name: Optional[str] = None) -> logging.Logger:
    """
    Get a logger in the JACOBItools namespace.

    Args:
        name (str, optional): module name. If None, returns the package logger.

    Returns:
        logging.Logger: the (child) logger
    """
    if name is None:
        return logging.getLogger(LOGGER_NAME)
    if not name.startswith(LOGGER_NAME):
        name = f"{LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def _to_level(level: Union[str, int]) -> int:
    if isinstance(level, str):
        return getattr(logging, level.upper())
    return level


def set_log_level(
    level: Union[str, int]) -> None:
    """Set the level of the package logger ("DEBUG", "INFO", ... or an int)."""
    logging.getLogger(LOGGER_NAME).setLevel(_to_level(level))


def configure_logging(
    level: Union[str, int] = "INFO",
    format_string: Optional[str] = None) -> None:
    """
    Attach a stderr handler to the package logger.

    Args:
        level (str | int, optional): logging level. Defaults to "INFO".
        format_string (str, optional): handler format. Defaults to DEFAULT_FORMAT.
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.handlers.clear()

    level = _to_level(level)
    logger.setLevel(level)

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(format_string or DEFAULT_FORMAT))
    handler.setLevel(level)
    logger.addHandler(handler)
    logger.propagate = False


@contextmanager
def log_level(
    level: Union[str, int]):
    """Temporarily change the package log level."""
    logger = logging.getLogger(LOGGER_NAME)
    old_level = logger.level
    logger.setLevel(_to_level(level))
    try:
        yield
    finally:
        logger.setLevel(old_level)


_logger = get_logger()
if not _logger.handlers:
    _logger.addHandler(logging.NullHandler())
