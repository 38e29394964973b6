"""
Logging helpers shared by the scoring components
"""

import logging
from typing import Optional

from config.scoring_config import LOG_FORMAT, LOG_LEVEL


def get_logger(name: str, log_level: Optional[str] = None) -> logging.Logger:
    """
    Get a logger with a stream handler attached

    Args:
        name: Logger name (usually __name__)
        log_level: Logging level name, defaults to LOG_LEVEL

    Returns:
        Configured logger
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, (log_level or LOG_LEVEL).upper()))

    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(handler)

    return logger
