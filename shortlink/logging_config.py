"""Logging setup for the shortlink service."""

import logging
import sys

__all__ = ["configure_logging"]


def configure_logging(level: str = "INFO") -> logging.Logger:
    """Attach a stdout handler to the ``shortlink`` logger namespace.

    Safe to call more than once; the handler is only added the first time.
    """
    logger = logging.getLogger("shortlink")
    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        formatter = logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s")
        handler.setFormatter(formatter)
        logger.addHandler(handler)
    logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger("uvicorn.error").propagate = True
    return logger
