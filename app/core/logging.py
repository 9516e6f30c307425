"""Logging configuration for the performance API."""

import logging
import sys

from app.core.config import LOG_LEVEL


def setup_logging(level: str = LOG_LEVEL) -> logging.Logger:
    """
    Attach a stdout handler to the root logger once.

    Calling it again (reloads, test clients) leaves the existing handler alone.
    """
    root = logging.getLogger()
    root.setLevel(getattr(logging, level, logging.INFO))

    if any(getattr(h, "_performance_api", False) for h in root.handlers):
        return root

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(
        logging.Formatter(
            fmt="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )
    )
    handler._performance_api = True
    root.addHandler(handler)
    return root
