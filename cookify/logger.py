"""
Logging setup for Cookify.

Every module logs through ``logging.getLogger(__name__)``; this wires the
shared ``cookify`` parent logger to the console once, at process start.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional

from cookify.config import Settings


def setup_logging(log_level: Optional[str] = None) -> logging.Logger:
    """
    Configure the ``cookify`` logger.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR. Uses settings when not provided.

    Returns:
        The configured logger.
    """
    level = (log_level or Settings().log_level).upper()

    logger = logging.getLogger("cookify")
    logger.setLevel(getattr(logging, level, logging.INFO))
    logger.handlers.clear()

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%H:%M:%S",
    ))
    logger.addHandler(handler)

    # Keep third-party chatter out of the app log
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("openai").setLevel(logging.WARNING)

    logger.debug("Logging initialized - Level: %s", level)
    return logger
