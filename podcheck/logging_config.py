"""Loguru sink setup for scripts and services."""

import sys
from typing import Any, Optional

from loguru import logger

LOG_FORMAT = (
    "<green>{time:YYYY-MM-DD HH:mm:ss}</green> | "
    "<level>{level: <8}</level> | "
    "<level>{message}</level>"
)


def setup_logging(level: str = "INFO", sink: Optional[Any] = None) -> int:
    """
    Replaces loguru's default sink with the podcheck format.

    Args:
        level: Minimum level (TRACE, DEBUG, INFO, WARNING, ERROR)
        sink: Target (defaults to stderr so stdout stays clean for results)

    Returns:
        Id of the added sink
    """
    logger.remove()
    return logger.add(sink if sink is not None else sys.stderr, format=LOG_FORMAT, level=level.upper())
