"""Value types of the composition data model."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping, Sequence
from dataclasses import dataclass, field, replace
from typing import Any

# channel name -> index-aligned readings
Spectrum = Mapping[str, Sequence[float]]
Range = tuple[float, float]


@dataclass
class Sample:
    """One point of composition space.

    Attributes:
        composition: Element -> fraction in [0, 1]. Absent elements count as 0.
        scalars: Property name -> value.
    """

    composition: dict[str, float] = field(default_factory=dict)
    scalars: dict[str, float] = field(default_factory=dict)

    def fraction(self, element: str) -> float:
        return self.composition.get(element, 0.0)

    def scalar(self, name: str) -> float | None:
        return self.scalars.get(name)

    def copy(self) -> Sample:
        return Sample(composition=dict(self.composition), scalars=dict(self.scalars))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Sample:
        return cls(
            composition={str(k): float(v) for k, v in data.get("composition", {}).items()},
            scalars={str(k): float(v) for k, v in data.get("scalars", {}).items()},
        )

    def to_dict(self) -> dict[str, dict[str, float]]:
        return {"composition": dict(self.composition), "scalars": dict(self.scalars)}


@dataclass(frozen=True)
class Axis:
    """A varying element of composition space.

    Attributes:
        element: Element name.
        spacing: Difference between the two smallest distinct observed
            fractions, 0 when only one value was observed.
        range: (min, max) of observed fractions, or a range assigned by a
            parent decomposition.
    """

    element: str
    spacing: float
    range: Range

    def with_range(self, low: float, high: float) -> Axis:
        return replace(self, range=(low, high))

    @property
    def label(self) -> str:
        return self.element[:1].upper() + self.element[1:]


class AxisOrder:
    """Explicit total order over axis keys, queryable in both directions."""

    def __init__(self, keys: Iterable[str] = ()) -> None:
        self._keys: tuple[str, ...] = ()
        self._index: dict[str, int] = {}
        for key in keys:
            if key in self._index:
                continue
            self._index[key] = len(self._keys)
            self._keys += (key,)

    @property
    def keys(self) -> tuple[str, ...]:
        return self._keys

    def index_of(self, element: str) -> int | None:
        return self._index.get(element)

    def element_at(self, index: int) -> str | None:
        if 0 <= index < len(self._keys):
            return self._keys[index]
        return None

    def __contains__(self, element: object) -> bool:
        return element in self._index

    def __iter__(self) -> Iterator[str]:
        return iter(self._keys)

    def __len__(self) -> int:
        return len(self._keys)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, AxisOrder):
            return self._keys == other._keys
        if isinstance(other, (tuple, list)):
            return self._keys == tuple(other)
        return NotImplemented

    def __hash__(self) -> int:
        return hash(self._keys)

    def __repr__(self) -> str:
        return f"AxisOrder({list(self._keys)!r})"


def as_samples(samples: Iterable[Sample | Mapping[str, Any]]) -> list[Sample]:
    """Normalize samples given as ``Sample`` objects or plain dicts into owned copies."""
    return [s.copy() if isinstance(s, Sample) else Sample.from_dict(s) for s in samples]
