"""Exceptions raised by compviz.

Recoverable data conditions are reported through
:class:`compviz.core.diagnostics.Diagnostics` instead of exceptions; these
classes cover misuse and unreadable configuration only.
"""


class CompvizError(Exception):
    """Base exception for compviz errors."""
    pass


class ConfigError(CompvizError, ValueError):
    """Raised when a configuration cannot be loaded or is invalid."""
    pass
