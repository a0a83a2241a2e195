"""Constraint-based filtering of samples.

A constraint either bounds one element's fraction to an interval, widened
by the tolerance on both sides, or applies an arbitrary predicate to it.
Constraints combine as a conjunction, so their order never changes the
surviving set. Elements missing from a composition are read as 0.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from typing import Union

from compviz.config.explorer_config import EPSILON
from compviz.data.types import Axis, Range, Sample

FractionPredicate = Callable[[float, float], bool]


@dataclass(frozen=True)
class RangeConstraint:
    """Keep samples with ``low - eps < fraction < high + eps``."""

    element: str
    range: Range

    def matches(self, fraction: float, epsilon: float) -> bool:
        low, high = self.range
        return low - epsilon < fraction < high + epsilon


@dataclass(frozen=True)
class PredicateConstraint:
    """Keep samples for which ``predicate(fraction, eps)`` is true."""

    element: str
    predicate: FractionPredicate

    def matches(self, fraction: float, epsilon: float) -> bool:
        return bool(self.predicate(fraction, epsilon))


Constraint = Union[RangeConstraint, PredicateConstraint]


def equals(element: str, value: float) -> RangeConstraint:
    """Fraction equal to ``value`` within tolerance."""
    return RangeConstraint(element, (value, value))


def not_equals(element: str, value: float) -> PredicateConstraint:
    """Fraction farther than the tolerance from ``value``."""
    return PredicateConstraint(element, lambda fraction, eps: abs(fraction - value) > eps)


def as_constraint(item: Constraint | Axis) -> Constraint:
    """Accept an :class:`Axis` as a range constraint over its own range."""
    if isinstance(item, (RangeConstraint, PredicateConstraint)):
        return item
    if isinstance(item, Axis):
        return RangeConstraint(item.element, item.range)
    raise TypeError(f"Unsupported constraint type: {type(item).__name__}")


def filter_samples(
    samples: Iterable[Sample],
    constraints: Iterable[Constraint | Axis],
    epsilon: float = EPSILON,
) -> list[Sample]:
    """Return the samples satisfying every constraint, in input order.

    The returned list holds the input sample objects; callers that need
    independent copies must copy them.
    """
    constraints = [as_constraint(c) for c in constraints]
    return [
        sample
        for sample in samples
        if all(c.matches(sample.fraction(c.element), epsilon) for c in constraints)
    ]
