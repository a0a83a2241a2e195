"""Structured diagnostics for recoverable data conditions.

Operations in the data layer never abort on unexpected input. Instead they
record a :class:`Diagnostic` in a :class:`Diagnostics` collector passed to
them (or owned by the dataset they run on) and continue with a best-effort
result. Each recorded diagnostic is also logged as a warning.

Example:
    >>> diagnostics = Diagnostics()
    >>> axes, order = discover_axes(samples, 3, diagnostics=diagnostics)
    >>> if DiagnosticCode.DIMENSION_MISMATCH in diagnostics.codes():
    ...     print(diagnostics.by_code(DiagnosticCode.DIMENSION_MISMATCH)[0].message)
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from compviz.core.logging import get_logger

logger = get_logger(__name__)


class DiagnosticCode(str, Enum):
    """Kinds of recoverable conditions."""

    DIMENSION_MISMATCH = "dimension_mismatch"
    UNKNOWN_SCALAR = "unknown_scalar"
    UNKNOWN_CHANNEL = "unknown_channel"
    UNKNOWN_AXIS = "unknown_axis"
    MISSING_CHANNEL = "missing_channel"
    EMPTY_INPUT = "empty_input"


@dataclass(frozen=True)
class Diagnostic:
    """A single recoverable condition.

    Attributes:
        code: Kind of condition.
        message: Human-readable description.
        context: Structured details (element names, counts, indices).
    """

    code: DiagnosticCode
    message: str
    context: Mapping[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"


class Diagnostics:
    """Accumulating collector of :class:`Diagnostic` records."""

    def __init__(self) -> None:
        self._records: list[Diagnostic] = []

    def add(
        self,
        code: DiagnosticCode,
        message: str,
        log: logging.Logger | None = None,
        **context: Any,
    ) -> Diagnostic:
        """Record a diagnostic and log it as a warning.

        Args:
            code: Kind of condition.
            message: Human-readable description.
            log: Logger of the reporting module; the diagnostics logger is
                used when omitted.
            **context: Structured details stored on the record.

        Returns:
            The recorded diagnostic.
        """
        diagnostic = Diagnostic(code=code, message=message, context=dict(context))
        self._records.append(diagnostic)
        (log or logger).warning(message)
        return diagnostic

    def extend(self, other: Diagnostics) -> None:
        """Append the records of another collector without re-logging them."""
        self._records.extend(other)

    def by_code(self, code: DiagnosticCode) -> list[Diagnostic]:
        return [d for d in self._records if d.code == code]

    def codes(self) -> set[DiagnosticCode]:
        return {d.code for d in self._records}

    def clear(self) -> None:
        self._records.clear()

    def __iter__(self) -> Iterator[Diagnostic]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)

    def __bool__(self) -> bool:
        return bool(self._records)

    def __repr__(self) -> str:
        return f"Diagnostics({len(self._records)} records)"
