"""Logger construction shared by the client, coordinators and console."""

from typing import Optional
import logging
import sys

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def build_default_logger(name: str) -> logging.Logger:
    logger = logging.getLogger(name)
    if not logger.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter(LOG_FORMAT))
        logger.addHandler(h)
        logger.setLevel(logging.INFO)
    return logger


def configure_logging(level: str = "INFO", stream: Optional[object] = None) -> logging.Logger:
    """Attach a single stdout handler to the ``crm`` logger tree."""
    logger = logging.getLogger("crm")
    logger.handlers.clear()
    handler = logging.StreamHandler(stream or sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = False
    return logger
