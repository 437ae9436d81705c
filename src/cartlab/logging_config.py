"""Handler setup for the ``cartlab`` logger hierarchy."""

from __future__ import annotations

import logging
import sys
from typing import Optional

LOG_FORMAT = "%(asctime)s %(levelname)-7s %(name)s: %(message)s"
LOG_DATEFMT = "%H:%M:%S"


def setup_logging(level: int = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Attach console (and optionally file) handlers to the ``cartlab`` logger.

    Parameters
    ----------
    level:
        Threshold applied to the logger and to every handler.
    log_file:
        When given, records are also written to this path (truncated first).

    Returns
    -------
    logging.Logger
        The configured ``cartlab`` logger. Calling this again replaces the
        handlers instead of stacking duplicates.
    """
    root = logging.getLogger("cartlab")
    root.setLevel(level)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATEFMT)
    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode="w", encoding="utf-8"))

    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)
        root.addHandler(handler)

    root.debug("logging configured at %s", logging.getLevelName(level))
    return root
