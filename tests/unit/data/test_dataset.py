"""Tests for compviz.data.dataset."""

import pytest

from compviz.config import ExplorerConfig
from compviz.core.diagnostics import DiagnosticCode
from compviz.data.dataset import CompositionDataset
from compviz.data.slicer import RangeConstraint
from compviz.data.types import Axis, Sample


@pytest.fixture
def ternary_dataset():
    samples = [
        Sample({"fe": f, "co": 0.5 - f / 2, "ni": 0.5 - f / 2}, {"T": 300 + 100 * f, "P": 1.0})
        for f in (0.0, 0.2, 0.4)
    ] + [Sample({"fe": 0.2, "co": 0.2, "ni": 0.6}, {"T": 250})]
    dataset = CompositionDataset(3)
    dataset.set_data(samples)
    return dataset


class TestSetData:
    """Tests for CompositionDataset.set_data."""

    def test_discovers_axes(self, ternary_dataset):
        assert list(ternary_dataset.axis_order) == ["fe", "co", "ni"]
        assert ternary_dataset.axis("fe").range == (0.0, 0.4)
        assert not ternary_dataset.diagnostics

    def test_active_scalar_defaults_to_first(self, ternary_dataset):
        assert ternary_dataset.active_scalar == "T"
        assert ternary_dataset.scalars() == ["T", "P"]

    def test_active_scalar_kept_across_reset(self, ternary_dataset):
        ternary_dataset.set_active_scalar("P")
        ternary_dataset.set_data([Sample({"fe": 1.0}, {"X": 1.0, "P": 2.0})])
        assert ternary_dataset.active_scalar == "P"

    def test_active_scalar_falls_back(self, ternary_dataset):
        ternary_dataset.set_active_scalar("P")
        ternary_dataset.set_data([Sample({"fe": 1.0}, {"X": 1.0})])
        assert ternary_dataset.active_scalar == "X"

    def test_empty_reset(self, ternary_dataset):
        ternary_dataset.set_data([])
        assert len(ternary_dataset) == 0
        assert ternary_dataset.axes == {}
        assert ternary_dataset.active_scalar is None
        assert ternary_dataset.scalar_range() is None

    def test_dimension_mismatch(self, line_samples):
        dataset = CompositionDataset(1)
        dataset.set_data(line_samples)
        assert DiagnosticCode.DIMENSION_MISMATCH in dataset.diagnostics.codes()
        assert len(dataset.axis_order) == 3

    def test_explicit_axes_skip_discovery(self, line_samples):
        axes = {"Co": Axis("Co", 0.1, (0.0, 1.0)), "Ni": Axis("Ni", 0.1, (0.0, 1.0))}
        dataset = CompositionDataset(2)
        dataset.set_data(line_samples, axes=axes, axis_order=["Ni", "Co"])
        assert dataset.axes == axes
        assert list(dataset.axis_order) == ["Ni", "Co"]
        assert not dataset.diagnostics


class TestAxisLookup:
    """Axis queries by name and position."""

    def test_by_index(self, ternary_dataset):
        assert ternary_dataset.axis(1).element == "co"
        assert ternary_dataset.axis(3) is None
        assert ternary_dataset.axis(-1) is None

    def test_unknown_name(self, ternary_dataset):
        assert ternary_dataset.axis("zn") is None

    def test_labels(self, ternary_dataset):
        assert ternary_dataset.axis_label(0) == "Fe"
        assert ternary_dataset.axis_label("ni") == "Ni"
        assert ternary_dataset.axis_label(7) == "X"

    def test_fallback_label_from_config(self):
        dataset = CompositionDataset(3, config=ExplorerConfig(fallback_axis_label="?"))
        assert dataset.axis_label(0) == "?"

    def test_set_axis_order(self, ternary_dataset):
        ternary_dataset.set_axis_order(["ni", "zn", "fe", "co"])
        assert list(ternary_dataset.axis_order) == ["ni", "fe", "co"]
        assert ternary_dataset.axis(0).element == "ni"
        assert DiagnosticCode.UNKNOWN_AXIS in ternary_dataset.diagnostics.codes()

    def test_set_axes_overrides_range(self, ternary_dataset):
        ternary_dataset.set_axes({"fe": ternary_dataset.axis("fe").with_range(0.1, 0.7)})
        assert ternary_dataset.axis("fe").range == (0.1, 0.7)
        assert not ternary_dataset.diagnostics

    def test_set_axes_unknown_is_reported(self, ternary_dataset):
        ternary_dataset.set_axes({"zn": Axis("zn", 0.1, (0.0, 1.0))})
        assert "zn" in ternary_dataset.axes
        assert ternary_dataset.axis("zn") is None
        assert DiagnosticCode.UNKNOWN_AXIS in ternary_dataset.diagnostics.codes()


class TestScalars:
    """Active scalar selection and ranges."""

    def test_unknown_scalar_keeps_selection(self, ternary_dataset):
        assert ternary_dataset.set_active_scalar("Q") is False
        assert ternary_dataset.active_scalar == "T"
        diagnostics = ternary_dataset.diagnostics.by_code(DiagnosticCode.UNKNOWN_SCALAR)
        assert diagnostics[0].context["scalar"] == "Q"

    def test_scalar_range(self, ternary_dataset):
        assert ternary_dataset.scalar_range("T") == (250.0, 340.0)
        assert ternary_dataset.scalar_range() == (250.0, 340.0)
        assert ternary_dataset.scalar_range("P") == (1.0, 1.0)
        assert ternary_dataset.scalar_range("Q") is None


class TestSliceAndCopy:
    """Slicing and ownership."""

    def test_slice(self, line_samples):
        dataset = CompositionDataset(1)
        dataset.set_data(line_samples)
        result = dataset.slice([RangeConstraint("Fe", (0.05, 0.2))])
        assert result == line_samples[1:]

    def test_slice_returns_copies(self, ternary_dataset):
        ternary_dataset.slice([])[0].composition["fe"] = 0.99
        assert ternary_dataset.samples[0].fraction("fe") == 0.0

    def test_copy_is_independent(self, ternary_dataset):
        other = ternary_dataset.copy()
        other.set_data([])
        assert len(ternary_dataset) == 4
        assert list(ternary_dataset.axis_order) == ["fe", "co", "ni"]

    def test_copy_keeps_state(self, ternary_dataset):
        ternary_dataset.set_active_scalar("P")
        other = ternary_dataset.copy()
        assert other.axes == ternary_dataset.axes
        assert other.axis_order == ternary_dataset.axis_order
        assert other.active_scalar == "P"
