"""Algorithms consuming the data layer: quaternary decomposition and spectral binning."""

from compviz.analysis.quaternary import (
    PERMUTATIONS,
    QuaternaryDecomposer,
    QuaternaryDecomposition,
    ShellSpec,
    broadcast_active_scalar,
    decompose,
)
from compviz.analysis.spectral_binning import (
    HeatMapDataset,
    HeatMapGrid,
    SpectralBinner,
    compute_grid,
    median_upper,
)

__all__ = [
    "PERMUTATIONS",
    "QuaternaryDecomposer",
    "QuaternaryDecomposition",
    "ShellSpec",
    "broadcast_active_scalar",
    "decompose",
    "HeatMapDataset",
    "HeatMapGrid",
    "SpectralBinner",
    "compute_grid",
    "median_upper",
]
