"""
Logging setup.

Module loggers hang off the ``contactnexus`` logger; service loggers use the
``services.<Name>`` namespace and are configured alongside it.
"""

import logging
import sys
from typing import Union

LOGGER_NAMES = ("contactnexus", "services")


def setup_logging(level: Union[int, str] = logging.INFO) -> logging.Logger:
    """Install a single stdout handler on the application loggers."""
    if isinstance(level, str):
        level = logging.getLevelName(level.upper())
        if not isinstance(level, int):
            level = logging.INFO

    logger = logging.getLogger("contactnexus")
    if logger.handlers:
        return logger  # already configured

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter("[%(asctime)s] %(levelname)s %(name)s: %(message)s"))
    for name in LOGGER_NAMES:
        named = logging.getLogger(name)
        named.setLevel(level)
        named.addHandler(handler)
    return logger
