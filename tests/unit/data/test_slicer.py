"""Tests for compviz.data.slicer."""

import pytest

from compviz.data.slicer import (
    PredicateConstraint,
    RangeConstraint,
    as_constraint,
    equals,
    filter_samples,
    not_equals,
)
from compviz.data.types import Axis, Sample


def fe(value):
    return Sample({"Fe": value, "Ni": 1 - value})


class TestRangeConstraint:
    """Boundary behaviour of range constraints with epsilon = 1e-6."""

    @pytest.mark.parametrize("value", [0.2, 0.1999998, 0.3, 0.4, 0.4000009])
    def test_kept(self, value):
        assert filter_samples([fe(value)], [RangeConstraint("Fe", (0.2, 0.4))]) != []

    @pytest.mark.parametrize("value", [0.19999, 0.40001, 0.0])
    def test_rejected(self, value):
        assert filter_samples([fe(value)], [RangeConstraint("Fe", (0.2, 0.4))]) == []

    def test_custom_epsilon(self):
        """A wider tolerance keeps samples the default rejects."""
        constraint = RangeConstraint("Fe", (0.2, 0.4))
        assert filter_samples([fe(0.19999)], [constraint], epsilon=1e-4) != []


class TestFilterSamples:
    """Tests for filter_samples."""

    def test_line_scenario(self, line_samples):
        """Fe in [0.05, 0.2] keeps the second and third samples."""
        result = filter_samples(line_samples, [RangeConstraint("Fe", (0.05, 0.2))])
        assert result == line_samples[1:]

    def test_missing_element_reads_as_zero(self):
        samples = [Sample({"Ni": 1.0}), Sample({"Fe": 0.5, "Ni": 0.5})]
        result = filter_samples(samples, [equals("Fe", 0.0)])
        assert result == samples[:1]

    def test_conjunction_is_order_independent(self, quaternary_samples):
        constraints = [
            RangeConstraint("A", (0.1, 0.5)),
            not_equals("B", 0.2),
            PredicateConstraint("C", lambda f, eps: f < 0.3 + eps),
        ]
        forward = filter_samples(quaternary_samples, constraints)
        backward = filter_samples(quaternary_samples, list(reversed(constraints)))
        assert forward == backward
        assert forward
        for sample in forward:
            assert 0.1 - 1e-6 < sample.fraction("A") < 0.5 + 1e-6
            assert abs(sample.fraction("B") - 0.2) > 1e-6

    def test_no_constraints_keeps_everything(self, line_samples):
        assert filter_samples(line_samples, []) == line_samples

    def test_predicate_receives_epsilon(self):
        seen = []

        def predicate(fraction, eps):
            seen.append(eps)
            return True

        filter_samples([fe(0.1)], [PredicateConstraint("Fe", predicate)], epsilon=1e-3)
        assert seen == [1e-3]

    def test_axis_is_a_range_constraint(self, line_samples):
        axis = Axis("Fe", 0.1, (0.1, 0.1))
        assert filter_samples(line_samples, [axis]) == [line_samples[1]]

    def test_unsupported_constraint(self):
        with pytest.raises(TypeError, match="Unsupported constraint"):
            as_constraint({"element": "Fe", "range": (0, 1)})
