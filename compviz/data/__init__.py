"""Composition data model: samples, axes, slicing and the dataset query surface."""

from compviz.data.axes import discover_axes
from compviz.data.dataset import CompositionDataset
from compviz.data.sample_store import SampleStore
from compviz.data.slicer import (
    Constraint,
    PredicateConstraint,
    RangeConstraint,
    equals,
    filter_samples,
    not_equals,
)
from compviz.data.types import Axis, AxisOrder, Sample, Spectrum

__all__ = [
    "Axis",
    "AxisOrder",
    "CompositionDataset",
    "Constraint",
    "PredicateConstraint",
    "RangeConstraint",
    "Sample",
    "SampleStore",
    "Spectrum",
    "discover_axes",
    "equals",
    "filter_samples",
    "not_equals",
]
