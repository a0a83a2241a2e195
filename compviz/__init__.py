"""
compviz - Data layer for visual exploration of materials-composition datasets.

This package discovers the geometry of composition datasets, slices them,
decomposes quaternary spaces into ternary sub-diagrams, and bins spectra
into heat-map grids. Rendering is left to the caller.
"""

__version__ = "0.1.0"
__author__ = "compviz Project"

from .config import ExplorerConfig, load_config
from .core import Diagnostic, DiagnosticCode, Diagnostics
from .data import (
    Axis,
    AxisOrder,
    CompositionDataset,
    PredicateConstraint,
    RangeConstraint,
    Sample,
    SampleStore,
    discover_axes,
    filter_samples,
)
from .analysis import (
    HeatMapDataset,
    HeatMapGrid,
    QuaternaryDecomposer,
    SpectralBinner,
    compute_grid,
    decompose,
)
from .spectra import SpectrumMeta, SpectrumStack

__all__ = [
    # Configuration
    "ExplorerConfig",
    "load_config",

    # Diagnostics
    "Diagnostic",
    "DiagnosticCode",
    "Diagnostics",

    # Data model
    "Axis",
    "AxisOrder",
    "CompositionDataset",
    "PredicateConstraint",
    "RangeConstraint",
    "Sample",
    "SampleStore",
    "discover_axes",
    "filter_samples",

    # Analysis
    "HeatMapDataset",
    "HeatMapGrid",
    "QuaternaryDecomposer",
    "SpectralBinner",
    "compute_grid",
    "decompose",

    # Spectra
    "SpectrumMeta",
    "SpectrumStack",
]
