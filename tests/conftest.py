"""
Pytest configuration for compviz tests.

Shared sample fixtures: a small ternary line through composition space and
a full quaternary grid at 0.1 resolution.
"""

import itertools

import pytest

from compviz.data import CompositionDataset, Sample


@pytest.fixture
def line_samples():
    """Three Fe-Co-Ni samples in which only Fe varies."""
    return [
        Sample(composition={"Fe": 0.0, "Co": 0.5, "Ni": 0.5}, scalars={"T": 300}),
        Sample(composition={"Fe": 0.1, "Co": 0.45, "Ni": 0.45}, scalars={"T": 310}),
        Sample(composition={"Fe": 0.2, "Co": 0.4, "Ni": 0.4}, scalars={"T": 320}),
    ]


def make_quaternary_grid(steps: int = 10):
    """All compositions of A, B, C, D in multiples of 1/steps summing to 1."""
    samples = []
    for a, b, c in itertools.product(range(steps + 1), repeat=3):
        d = steps - a - b - c
        if d < 0:
            continue
        samples.append(
            Sample(
                composition={"A": a / steps, "B": b / steps, "C": c / steps, "D": d / steps},
                scalars={"energy": float(a - d), "gap": float(b + c)},
            )
        )
    return samples


@pytest.fixture
def quaternary_samples():
    return make_quaternary_grid()


@pytest.fixture
def quaternary_dataset(quaternary_samples):
    dataset = CompositionDataset(4)
    dataset.set_data(quaternary_samples)
    return dataset
