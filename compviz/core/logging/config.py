"""Logger configuration for compviz."""

from __future__ import annotations

import logging
import sys
from threading import Lock
from typing import TextIO

ROOT_LOGGER_NAME = "compviz"

_DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
_DATE_FORMAT = "%H:%M:%S"

_lock = Lock()
_installed: list[logging.Handler] = []


def _verbose_to_level(verbose: int) -> int:
    if verbose <= 0:
        return logging.WARNING
    if verbose == 1:
        return logging.INFO
    return logging.DEBUG


def get_logger(name: str) -> logging.Logger:
    """Get a logger inside the compviz hierarchy.

    Args:
        name: Usually ``__name__`` of the calling module. Names outside the
            ``compviz`` namespace are nested under it.

    Returns:
        The corresponding ``logging.Logger``.
    """
    if name != ROOT_LOGGER_NAME and not name.startswith(ROOT_LOGGER_NAME + "."):
        name = f"{ROOT_LOGGER_NAME}.{name}"
    return logging.getLogger(name)


def configure_logging(
    verbose: int = 1,
    stream: TextIO | None = None,
    fmt: str = _DEFAULT_FORMAT,
) -> logging.Logger:
    """Install a console handler on the compviz root logger.

    Calling it again replaces the previously installed handler.

    Args:
        verbose: 0 for warnings only, 1 for info, 2 or more for debug.
        stream: Output stream, defaults to ``sys.stderr``.
        fmt: ``logging.Formatter`` format string.

    Returns:
        The configured root logger.
    """
    root = logging.getLogger(ROOT_LOGGER_NAME)
    with _lock:
        for handler in _installed:
            root.removeHandler(handler)
        _installed.clear()

        handler = logging.StreamHandler(stream or sys.stderr)
        handler.setFormatter(logging.Formatter(fmt, datefmt=_DATE_FORMAT))
        root.addHandler(handler)
        root.setLevel(_verbose_to_level(verbose))
        _installed.append(handler)
    return root


def is_configured() -> bool:
    """Return True if :func:`configure_logging` installed a handler."""
    with _lock:
        return bool(_installed)


def reset_logging() -> None:
    """Remove handlers installed by :func:`configure_logging`."""
    root = logging.getLogger(ROOT_LOGGER_NAME)
    with _lock:
        for handler in _installed:
            root.removeHandler(handler)
            handler.close()
        _installed.clear()
        root.setLevel(logging.NOTSET)
