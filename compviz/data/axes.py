"""Discovery of the varying elements of a composition dataset.

An axis is derived per element from the distinct fractions observed across
all samples: its range is the observed (min, max) and its spacing the gap
between the two smallest distinct values. Elements whose spacing is below
the tolerance are constant and may be discarded.
"""

from __future__ import annotations

from collections.abc import Iterable

import numpy as np

from compviz.config.explorer_config import EPSILON
from compviz.core.diagnostics import DiagnosticCode, Diagnostics
from compviz.core.logging import get_logger
from compviz.data.types import Axis, AxisOrder, Sample

logger = get_logger(__name__)


def collect_fractions(samples: Iterable[Sample]) -> dict[str, np.ndarray]:
    """Sorted distinct fractions per element, elements in first-appearance order."""
    observed: dict[str, set[float]] = {}
    for sample in samples:
        for element, fraction in sample.composition.items():
            observed.setdefault(element, set()).add(float(fraction))
    return {element: np.unique(np.fromiter(values, dtype=float)) for element, values in observed.items()}


def axis_from_values(element: str, values: np.ndarray) -> Axis:
    """Build an axis from sorted distinct values."""
    spacing = float(values[1] - values[0]) if values.size > 1 else 0.0
    return Axis(element=element, spacing=spacing, range=(float(values[0]), float(values[-1])))


def discover_axes(
    samples: Iterable[Sample],
    target_dimensionality: int,
    discard_axes: bool = True,
    epsilon: float = EPSILON,
    diagnostics: Diagnostics | None = None,
) -> tuple[dict[str, Axis], AxisOrder]:
    """Derive the axes spanned by a set of samples.

    Args:
        samples: Samples to inspect.
        target_dimensionality: Expected number of axes. A different count is
            reported but not fatal.
        discard_axes: Drop constant axes (spacing below ``epsilon``). Disable
            for re-projected sub-datasets whose axes are assigned by a parent.
        epsilon: Comparison tolerance.
        diagnostics: Collector receiving a ``DIMENSION_MISMATCH`` record when
            the axis count differs from ``target_dimensionality``.

    Returns:
        ``(axes, order)``: axes keyed by element and their order of first
        appearance in the samples.
    """
    samples = list(samples)
    if not samples:
        return {}, AxisOrder()

    axes: dict[str, Axis] = {}
    for element, values in collect_fractions(samples).items():
        axis = axis_from_values(element, values)
        if discard_axes and abs(axis.spacing) < epsilon:
            logger.debug(f"Discarding constant axis '{element}'")
            continue
        axes[element] = axis

    if len(axes) != target_dimensionality:
        if diagnostics is None:
            diagnostics = Diagnostics()
        diagnostics.add(
            DiagnosticCode.DIMENSION_MISMATCH,
            f"Expected a {target_dimensionality}-dimensional space, "
            f"but {len(axes)} varying elements were found: {', '.join(axes) or 'none'}",
            log=logger,
            expected=target_dimensionality,
            found=len(axes),
            elements=tuple(axes),
        )

    return axes, AxisOrder(axes)
