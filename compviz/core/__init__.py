"""Core utilities: logging, diagnostics and exceptions."""

from compviz.core.diagnostics import Diagnostic, DiagnosticCode, Diagnostics
from compviz.core.exceptions import CompvizError, ConfigError

__all__ = [
    "Diagnostic",
    "DiagnosticCode",
    "Diagnostics",
    "CompvizError",
    "ConfigError",
]
