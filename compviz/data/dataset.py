"""
CompositionDataset - query surface over one composition dataset

Combines a SampleStore with its discovered axes, an explicit axis order and
the active scalar selection. Datasets are reinitialized wholesale through
``set_data``; every instance owns its samples, axes and scalar registry, so
sub-datasets derived from it never alias its state.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from typing import Any

from compviz.config.explorer_config import ExplorerConfig
from compviz.core.diagnostics import DiagnosticCode, Diagnostics
from compviz.core.logging import get_logger
from compviz.data.axes import discover_axes
from compviz.data.sample_store import SampleStore
from compviz.data.slicer import Constraint, filter_samples
from compviz.data.types import Axis, AxisOrder, Range, Sample

logger = get_logger(__name__)


class CompositionDataset:
    """A set of samples spanning a ``dimensions``-dimensional composition space.

    Args:
        dimensions: Expected number of varying elements.
        config: Shared tolerances and labels. Defaults to ``ExplorerConfig()``.
        diagnostics: Collector for recoverable conditions. A new one is
            created when omitted.
    """

    def __init__(
        self,
        dimensions: int,
        config: ExplorerConfig | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> None:
        self.dimensions = dimensions
        self.config = config if config is not None else ExplorerConfig()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._store = SampleStore()
        self._axes: dict[str, Axis] = {}
        self._order = AxisOrder()
        self._active_scalar: str | None = None

    # ------------------------------------------------------------------
    # Initialization
    # ------------------------------------------------------------------

    def set_data(
        self,
        samples: Iterable[Sample | Mapping[str, Any]],
        discard_axes: bool = True,
        axes: Mapping[str, Axis] | None = None,
        axis_order: Iterable[str] | None = None,
    ) -> None:
        """Replace all samples and recompute axes, order and scalar registry.

        Args:
            samples: New samples; they are copied.
            discard_axes: Drop constant axes during discovery.
            axes: Explicit axes. When given, discovery is skipped entirely and
                these axes are installed as-is; used for projected
                sub-datasets whose axes come from a parent.
            axis_order: Explicit axis order. Defaults to the discovery order,
                or to the key order of ``axes``.
        """
        # Rebuild, then swap in one step.
        store = SampleStore(samples)
        if axes is not None:
            new_axes, order = dict(axes), AxisOrder(axes)
        else:
            new_axes, order = discover_axes(
                store,
                self.dimensions,
                discard_axes=discard_axes,
                epsilon=self.config.epsilon,
                diagnostics=self.diagnostics,
            )
        self._store, self._axes, self._order = store, new_axes, order

        if axis_order is not None:
            self.set_axis_order(axis_order)

        self._active_scalar = self._store.default_scalar(self._active_scalar)
        logger.debug(
            f"Dataset initialized: {len(self._store)} samples, "
            f"axes={list(self._order)}, active scalar={self._active_scalar}"
        )

    def set_axis_order(self, order: Iterable[str]) -> None:
        """Override the positional order of axes.

        Keys without a matching axis are skipped with an ``UNKNOWN_AXIS``
        diagnostic.
        """
        keys = []
        for key in order:
            if key in self._axes:
                keys.append(key)
            else:
                self.diagnostics.add(
                    DiagnosticCode.UNKNOWN_AXIS,
                    f"Cannot order axis '{key}': no such axis in the dataset",
                    log=logger,
                    element=key,
                )
        self._order = AxisOrder(keys)

    def set_axes(self, axes: Mapping[str, Axis]) -> None:
        """Override stored axes, e.g. with ranges fixed by a parent dataset.

        Axes that no sample spans are stored anyway and reported as
        ``UNKNOWN_AXIS``.
        """
        for key, axis in axes.items():
            if key not in self._axes:
                self.diagnostics.add(
                    DiagnosticCode.UNKNOWN_AXIS,
                    f"Setting axis '{key}', but no samples in the dataset span this dimension",
                    log=logger,
                    element=key,
                )
            self._axes[key] = axis

    # ------------------------------------------------------------------
    # Axes
    # ------------------------------------------------------------------

    @property
    def axes(self) -> dict[str, Axis]:
        return dict(self._axes)

    @property
    def axis_order(self) -> AxisOrder:
        return self._order

    def ordered_axes(self) -> list[Axis]:
        return [self._axes[key] for key in self._order]

    def axis(self, key: str | int) -> Axis | None:
        """Look up an ordered axis by element name or position."""
        if isinstance(key, str):
            element = key if key in self._order else None
        else:
            element = self._order.element_at(key)
        if element is None:
            return None
        return self._axes.get(element)

    def axis_label(self, key: str | int) -> str:
        """Capitalized element name, or the configured fallback label."""
        axis = self.axis(key)
        return axis.label if axis is not None else self.config.fallback_axis_label

    # ------------------------------------------------------------------
    # Scalars
    # ------------------------------------------------------------------

    def scalars(self) -> list[str]:
        return self._store.scalar_names()

    @property
    def active_scalar(self) -> str | None:
        return self._active_scalar

    def set_active_scalar(self, name: str | None) -> bool:
        """Select the active scalar.

        Returns:
            True if the selection changed to ``name``; False if ``name`` is
            not registered, in which case the previous selection is kept and
            an ``UNKNOWN_SCALAR`` diagnostic is recorded.
        """
        if self._store.has_scalar(name):
            self._active_scalar = name
            return True
        self.diagnostics.add(
            DiagnosticCode.UNKNOWN_SCALAR,
            f"Unable to set {name} as active scalar",
            log=logger,
            scalar=name,
            available=tuple(self.scalars()),
        )
        return False

    def default_scalar(self, preferred: str | None = None) -> str | None:
        return self._store.default_scalar(preferred)

    def scalar_range(self, name: str | None = None) -> Range | None:
        """(min, max) of a scalar over current samples.

        Args:
            name: Scalar name; the active scalar when omitted.

        Returns:
            The range, or None when there are no samples carrying the scalar.
        """
        name = name if name is not None else self._active_scalar
        if name is None:
            return None
        return self._store.scalar_range(name)

    # ------------------------------------------------------------------
    # Samples
    # ------------------------------------------------------------------

    @property
    def samples(self) -> list[Sample]:
        return [sample.copy() for sample in self._store]

    def slice(self, constraints: Iterable[Constraint | Axis]) -> list[Sample]:
        """Copies of the samples satisfying every constraint."""
        return [
            sample.copy()
            for sample in filter_samples(self._store, constraints, epsilon=self.config.epsilon)
        ]

    def copy(self) -> CompositionDataset:
        """Independent dataset with the same samples, axes, order and selection."""
        other = CompositionDataset(self.dimensions, config=self.config)
        other.set_data(self._store, axes=self._axes, axis_order=self._order)
        other._active_scalar = self._active_scalar
        return other

    def __len__(self) -> int:
        return len(self._store)

    def __repr__(self) -> str:
        return (
            f"CompositionDataset(dimensions={self.dimensions}, samples={len(self)}, "
            f"axes={list(self._order)})"
        )
