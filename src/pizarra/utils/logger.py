"""Logging helpers for Pizarra.

Thin wrapper over the standard library ``logging`` module so every logger
lives under the ``pizarra`` namespace. The library never installs handlers;
applications decide where records go.

Example:
    >>> from pizarra.utils.logger import get_logger
    >>> logger = get_logger(__name__)
    >>> logger.debug("block opener rejected at line %d", 12)
"""

from __future__ import annotations

import logging


def get_logger(name: str) -> logging.Logger:
    """Get a logger for the given name.

    Args:
        name: Logger name (typically __name__)

    Returns:
        logging.Logger under the "pizarra." prefix

    Example:
        >>> get_logger("math.render").name
        'pizarra.math.render'
    """
    if not (name == "pizarra" or name.startswith("pizarra.")):
        name = f"pizarra.{name}"
    return logging.getLogger(name)
