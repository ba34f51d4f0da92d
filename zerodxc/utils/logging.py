"""Minimal logging helpers for the package."""

import logging

DEFAULT_FORMAT = "%(levelname)s: %(message)s"


def get_logger(name: str = "zerodxc",
               level: int = logging.INFO,
               fmt: str = DEFAULT_FORMAT) -> logging.Logger:
    """Return a configured logger writing to stderr.

    A ``StreamHandler`` is attached only once per logger, so repeated calls
    do not duplicate log lines.
    """
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(fmt))
        logger.addHandler(handler)
    logger.setLevel(level)
    return logger
