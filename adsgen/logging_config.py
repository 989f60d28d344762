"""Logging configuration for the application."""
import logging
import sys
from typing import Optional


DEFAULT_FORMAT = "[%(asctime)s] %(levelname)s [%(name)s.%(funcName)s:%(lineno)d] %(message)s"


def setup_logger(
    name: str,
    level: Optional[int] = None,
    format_string: Optional[str] = None
) -> logging.Logger:
    """
    Configure and return a logger for an adsgen module.

    Args:
        name: Logger name (typically __name__)
        level: Logging level (defaults to INFO)
        format_string: Custom format string for log messages

    Returns:
        Logger writing to stdout with a single handler
    """
    level = logging.INFO if level is None else level
    format_string = format_string or DEFAULT_FORMAT

    logger = logging.getLogger(name)
    logger.setLevel(level)

    # Modules are imported more than once under reload
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setLevel(level)
        handler.setFormatter(logging.Formatter(format_string, datefmt="%Y-%m-%d %H:%M:%S"))
        logger.addHandler(handler)

    return logger
