"""Logging utilities for the fx_cbr package."""

from __future__ import annotations

import logging
from typing import Optional

_LOGGER: Optional[logging.Logger] = None


def get_logger(name: str = "fx_cbr") -> logging.Logger:
    """Return a named logger, attaching a null handler to the package root once."""
    global _LOGGER
    if _LOGGER is None:
        _LOGGER = logging.getLogger("fx_cbr")
        _LOGGER.addHandler(logging.NullHandler())
    return logging.getLogger(name)
