"""Logging setup shared by the ``mtgsdk`` command line tools."""

import logging
from logging import Logger

DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s %(name)s: %(message)s"
DEFAULT_DATEFMT = "%H:%M:%S"
PACKAGE_LOGGER = "mtgsdk"


def setup_logging(level: int = logging.INFO) -> Logger:
    """Configure the root handler and set the level of the ``mtgsdk`` loggers."""

    logging.basicConfig(level=level, format=DEFAULT_FORMAT, datefmt=DEFAULT_DATEFMT)
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.debug("mtgsdk logging initialised at level %s.", logging.getLevelName(level))
    return logger
