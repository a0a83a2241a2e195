"""Logging for compviz.

Library modules obtain a logger through :func:`get_logger` and never
configure handlers themselves. Applications (or tests) call
:func:`configure_logging` once at startup.

Usage:
    >>> from compviz.core.logging import get_logger, configure_logging
    >>>
    >>> configure_logging(verbose=1)
    >>> logger = get_logger(__name__)
    >>> logger.info("Decomposing dataset")
"""

from .config import (
    ROOT_LOGGER_NAME,
    configure_logging,
    get_logger,
    is_configured,
    reset_logging,
)
from .handlers import (
    BufferedHandler,
)

__all__ = [
    # Main API
    "get_logger",
    "configure_logging",
    "is_configured",
    "reset_logging",
    "ROOT_LOGGER_NAME",
    # Handlers
    "BufferedHandler",
]
