"""
Logging setup shared by the whole package.

All records go to stderr so that stdout only ever carries the endpoint report.
"""

from __future__ import annotations

import logging

from reqmap.config import Config

ROOT_LOGGER_NAME = "reqmap"


def _create_handler() -> logging.StreamHandler:
    handler = logging.StreamHandler()  # stderr
    handler.setFormatter(
        logging.Formatter(fmt=Config.LOG_FORMAT, datefmt=Config.LOG_DATE_FORMAT)
    )
    return handler


def _configure_root() -> logging.Logger:
    root = logging.getLogger(ROOT_LOGGER_NAME)
    if not root.handlers:
        root.addHandler(_create_handler())
        root.setLevel(Config.LOG_LEVEL)
        root.propagate = False
    return root


def get_logger(name: str) -> logging.Logger:
    """
    Return a logger under the `reqmap` hierarchy.
    Args:
        name: usually `__name__` of the calling module
    """
    _configure_root()
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def set_level(level: int) -> int:
    """Set the level of the `reqmap` logger and return the previous one."""
    root = _configure_root()
    previous = root.level
    root.setLevel(level)
    return previous
