"""Decomposition of a quaternary composition space into ternary sub-diagrams.

A 4-element simplex is cut into concentric shells. Shell ``i`` keeps the
samples whose four fractions are all at least ``i * shell_spacing``; its
boundary consists of four triangular facets, one per element held at that
minimum. Each facet becomes an independent 3-axis dataset obtained by a
fixed permutation of the parent axes, ready for ternary projection.

Samples lying on an edge shared by two facets would be drawn twice. For
every permutation after the first, samples whose second-role element also
sits at the shell minimum are left out, which attributes the edges
(A, D), (A, C) and (B, C) to the earlier facet. Shell and permutation
loops therefore run in index order.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Sequence
from dataclasses import dataclass, field

from compviz.config.explorer_config import ExplorerConfig
from compviz.core.diagnostics import DiagnosticCode, Diagnostics
from compviz.core.logging import get_logger
from compviz.data.dataset import CompositionDataset
from compviz.data.slicer import Constraint, RangeConstraint, equals, filter_samples, not_equals
from compviz.data.types import Axis, Range, Sample

logger = get_logger(__name__)

QUATERNARY_DIMENSIONS = 4
TERNARY_DIMENSIONS = 3

# Positions into the parent axis order (A, B, C, D). The last entry of each
# row is the element held at the shell minimum.
PERMUTATIONS: tuple[tuple[int, int, int, int], ...] = (
    (0, 1, 2, 3),  # A, B, C | D
    (2, 3, 1, 0),  # C, D, B | A
    (1, 0, 3, 2),  # B, A, D | C
    (3, 2, 0, 1),  # D, C, A | B
)


@dataclass(frozen=True)
class ShellSpec:
    """Geometry of one shell.

    Attributes:
        index: Shell index, 0 for the outermost shell.
        const_value: Minimum fraction of every element in the shell.
        projected_range: Range assigned to each ternary axis,
            ``(c, 1 - 3c)``.
    """

    index: int
    const_value: float
    projected_range: Range


@dataclass
class QuaternaryDecomposition:
    """Result of :meth:`QuaternaryDecomposer.decompose`.

    Attributes:
        shells: ``shells[i][k]`` is the ternary dataset of permutation ``k``
            in shell ``i``.
        specs: One :class:`ShellSpec` per shell.
        permutations: Element names of each permutation, fixed role last.
        diagnostics: Conditions recorded while decomposing.
    """

    shells: list[list[CompositionDataset]] = field(default_factory=list)
    specs: list[ShellSpec] = field(default_factory=list)
    permutations: list[tuple[str, ...]] = field(default_factory=list)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    def __len__(self) -> int:
        return len(self.shells)

    def __getitem__(self, index: int) -> list[CompositionDataset]:
        return self.shells[index]

    def __iter__(self) -> Iterator[list[CompositionDataset]]:
        return iter(self.shells)

    def datasets(self) -> Iterator[CompositionDataset]:
        """All sub-datasets, shell by shell."""
        for shell in self.shells:
            yield from shell


class QuaternaryDecomposer:
    """Builds shells of ternary sub-datasets from a 4-axis dataset.

    Args:
        config: Source of ``n_shells``, ``shell_spacing``,
            ``subplots_per_shell`` and the tolerance.
    """

    def __init__(self, config: ExplorerConfig | None = None) -> None:
        self.config = config if config is not None else ExplorerConfig()

    def decompose(
        self,
        dataset: CompositionDataset,
        n_shells: int | None = None,
        n_subplots_per_shell: int | None = None,
        axis_order: Sequence[str] | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> QuaternaryDecomposition:
        """Decompose ``dataset`` into ``n_shells`` shells of ternary datasets.

        Args:
            dataset: Dataset with four ordered axes.
            n_shells: Number of shells; ``config.n_shells`` when omitted.
            n_subplots_per_shell: Permutations used per shell (1 to 4);
                ``config.subplots_per_shell`` when omitted.
            axis_order: Element names assigned to roles A, B, C, D. Defaults
                to the dataset's axis order.
            diagnostics: Collector for recoverable conditions; a new one is
                created when omitted.

        Returns:
            The decomposition. Shells whose slice is empty hold empty
            datasets.

        Raises:
            ValueError: If ``n_shells`` is negative or
                ``n_subplots_per_shell`` is outside 1..4.
        """
        n_shells = self.config.n_shells if n_shells is None else n_shells
        n_subplots = self.config.subplots_per_shell if n_subplots_per_shell is None else n_subplots_per_shell
        if n_shells < 0:
            raise ValueError(f"n_shells must be >= 0, got {n_shells}")
        if not 1 <= n_subplots <= len(PERMUTATIONS):
            raise ValueError(
                f"n_subplots_per_shell must be between 1 and {len(PERMUTATIONS)}, got {n_subplots}"
            )
        if diagnostics is None:
            diagnostics = Diagnostics()

        axes = dataset.axes
        roles = self._resolve_roles(dataset, axis_order, diagnostics)
        result = QuaternaryDecomposition(diagnostics=diagnostics)
        if roles is not None:
            result.permutations = [tuple(roles[p] for p in perm) for perm in PERMUTATIONS[:n_subplots]]

        samples = dataset.samples
        for i in range(n_shells):
            const_value = i * self.config.shell_spacing
            spec = ShellSpec(
                index=i,
                const_value=const_value,
                projected_range=(const_value, 1 - 3 * const_value),
            )
            result.specs.append(spec)
            if roles is None:
                result.shells.append([self._child([], None, dataset, diagnostics) for _ in range(n_subplots)])
                continue
            result.shells.append(
                self._decompose_shell(samples, roles, axes, spec, n_subplots, dataset, diagnostics)
            )

        logger.info(
            f"Decomposed {len(samples)} samples into {n_shells} shells of {n_subplots} ternary datasets"
        )
        return result

    def _resolve_roles(
        self,
        dataset: CompositionDataset,
        axis_order: Sequence[str] | None,
        diagnostics: Diagnostics,
    ) -> tuple[str, ...] | None:
        if axis_order is None:
            keys = list(dataset.axis_order)
        else:
            keys = []
            for key in axis_order:
                if key in dataset.axes:
                    keys.append(key)
                else:
                    diagnostics.add(
                        DiagnosticCode.UNKNOWN_AXIS,
                        f"Axis '{key}' is not an axis of the dataset",
                        log=logger,
                        element=key,
                    )

        if len(keys) != QUATERNARY_DIMENSIONS:
            diagnostics.add(
                DiagnosticCode.DIMENSION_MISMATCH,
                f"A quaternary decomposition needs {QUATERNARY_DIMENSIONS} axes, got {len(keys)}",
                log=logger,
                expected=QUATERNARY_DIMENSIONS,
                found=len(keys),
                elements=tuple(keys),
            )
        if len(keys) < QUATERNARY_DIMENSIONS:
            return None
        return tuple(keys[:QUATERNARY_DIMENSIONS])

    def _decompose_shell(
        self,
        samples: list[Sample],
        roles: tuple[str, ...],
        axes: dict[str, Axis],
        spec: ShellSpec,
        n_subplots: int,
        parent: CompositionDataset,
        diagnostics: Diagnostics,
    ) -> list[CompositionDataset]:
        c = spec.const_value
        eps = self.config.epsilon
        shell_samples = filter_samples(samples, [RangeConstraint(e, (c, 1)) for e in roles], epsilon=eps)
        logger.debug(f"Shell {spec.index} (c={c:g}): {len(shell_samples)} samples")

        plots = []
        for k, perm in enumerate(PERMUTATIONS[:n_subplots]):
            p0, p1, p2, p3 = (roles[p] for p in perm)
            constraints: list[Constraint] = [equals(p3, c)]
            if k > 0:
                constraints.append(not_equals(p1, c))
            facet = filter_samples(shell_samples, constraints, epsilon=eps)
            projected = {e: axes[e].with_range(*spec.projected_range) for e in (p0, p1, p2)}
            plots.append(self._child(facet, projected, parent, diagnostics))
        return plots

    def _child(
        self,
        samples: Iterable[Sample],
        axes: dict[str, Axis] | None,
        parent: CompositionDataset,
        diagnostics: Diagnostics,
    ) -> CompositionDataset:
        child = CompositionDataset(TERNARY_DIMENSIONS, config=self.config)
        child.set_data(samples, axes=axes if axes is not None else {})
        scalar = parent.active_scalar
        if scalar is not None and len(child) > 0:
            child.set_active_scalar(scalar)
        diagnostics.extend(child.diagnostics)
        return child


def decompose(
    dataset: CompositionDataset,
    n_shells: int,
    n_subplots_per_shell: int = 4,
    shell_spacing: float | None = None,
    axis_order: Sequence[str] | None = None,
    diagnostics: Diagnostics | None = None,
) -> QuaternaryDecomposition:
    """Functional shortcut for :meth:`QuaternaryDecomposer.decompose`."""
    config = dataset.config
    if shell_spacing is not None:
        config = ExplorerConfig(**{**config.to_dict(), "shell_spacing": shell_spacing})
    return QuaternaryDecomposer(config).decompose(
        dataset,
        n_shells=n_shells,
        n_subplots_per_shell=n_subplots_per_shell,
        axis_order=axis_order,
        diagnostics=diagnostics,
    )


def broadcast_active_scalar(decomposition: QuaternaryDecomposition, name: str | None) -> int:
    """Re-resolve the active scalar of every sub-dataset.

    Each non-empty sub-dataset selects ``name`` if it carries it, otherwise
    its default scalar.

    Returns:
        Number of sub-datasets whose selection was set.
    """
    updated = 0
    for child in decomposition.datasets():
        resolved = child.default_scalar(name)
        if resolved is not None and child.set_active_scalar(resolved):
            updated += 1
    return updated
