"""
Centralized logging configuration for the ingredient engine.
"""
import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

FORMATTER = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

PACKAGE_LOGGER = "ingredient_engine"


def get_logger(name: str) -> logging.Logger:
    """
    Get a configured logger instance.

    A module logger gets its own stderr handler only while the root logger
    has none. Once the application configures logging the records reach it
    by propagation instead.

    Args:
        name: The name of the logger (typically __name__)

    Returns:
        A configured Logger instance
    """
    logger = logging.getLogger(name)

    # Only add handler if not already configured
    if not logger.handlers and not logging.root.handlers:
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(FORMATTER)
        logger.addHandler(handler)
        logger.setLevel(logging.INFO)

    return logger


def setup_logging(level: int = logging.INFO) -> None:
    """
    Setup the root logging configuration for the application.

    The root handler becomes the only one; handlers that ``get_logger``
    attached to package loggers are removed so each record prints once.

    Args:
        level: The logging level (default: INFO)
    """
    logging.basicConfig(
        level=level,
        format=LOG_FORMAT,
        datefmt=DATE_FORMAT,
        handlers=[logging.StreamHandler(sys.stderr)],
    )
    for name in list(logging.root.manager.loggerDict):
        if name == PACKAGE_LOGGER or name.startswith(PACKAGE_LOGGER + "."):
            logger = logging.getLogger(name)
            for handler in list(logger.handlers):
                logger.removeHandler(handler)
            logger.setLevel(level)
