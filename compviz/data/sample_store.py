"""Sample collection and scalar-name registry."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from typing import Any

import numpy as np

from compviz.data.types import Range, Sample, as_samples


class SampleStore:
    """Holds the current samples and the union of their scalar names.

    The store is replaced wholesale; there is no incremental append or
    removal. Samples are copied on the way in so that a store never shares
    mutable state with its caller or with another store.
    """

    def __init__(self, samples: Iterable[Sample | Mapping[str, Any]] = ()) -> None:
        self._samples: list[Sample] = []
        self._scalars: dict[str, None] = {}
        self.replace(samples)

    def replace(self, samples: Iterable[Sample | Mapping[str, Any]]) -> None:
        """Reset the store to the given samples and rebuild the scalar registry."""
        samples = as_samples(samples)
        scalars: dict[str, None] = {}
        for sample in samples:
            for key in sample.scalars:
                scalars.setdefault(key, None)
        self._samples = samples
        self._scalars = scalars

    @property
    def samples(self) -> list[Sample]:
        """Copies of the stored samples."""
        return [sample.copy() for sample in self._samples]

    def scalar_names(self) -> list[str]:
        """Scalar names in order of first appearance."""
        return list(self._scalars)

    def has_scalar(self, name: str | None) -> bool:
        return name is not None and name in self._scalars

    def default_scalar(self, preferred: str | None = None) -> str | None:
        """Resolve an active scalar.

        Returns ``preferred`` when it is registered, otherwise the first
        registered scalar, otherwise None.
        """
        if self.has_scalar(preferred):
            return preferred
        return next(iter(self._scalars), None)

    def scalar_values(self, name: str) -> np.ndarray:
        """Values of a scalar across samples, NaN where a sample lacks it."""
        return np.array(
            [np.nan if s.scalar(name) is None else s.scalar(name) for s in self._samples],
            dtype=float,
        )

    def scalar_range(self, name: str) -> Range | None:
        """(min, max) of a scalar, or None if no sample carries it."""
        values = self.scalar_values(name)
        values = values[~np.isnan(values)]
        if values.size == 0:
            return None
        return float(values.min()), float(values.max())

    def copy(self) -> SampleStore:
        return SampleStore(self._samples)

    def __len__(self) -> int:
        return len(self._samples)

    def __iter__(self) -> Iterator[Sample]:
        return iter(list(self._samples))

    def __bool__(self) -> bool:
        return bool(self._samples)
