"""
SpectrumStack - ordered collection of spectra for stacked line display

Spectra are drawn on shared axes, each shifted upward by its position times
a fixed offset. The stack tracks which channels are plotted and computes
the shifted series and the common extents.
"""
from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

import numpy as np

from compviz.config.explorer_config import ExplorerConfig
from compviz.core.logging import get_logger
from compviz.data.types import Range, Spectrum

logger = get_logger(__name__)


@dataclass(frozen=True)
class SpectrumMeta:
    """Identity and composition of a plotted spectrum."""

    id: int
    elements: tuple[str, ...] = field(default_factory=tuple)
    components: tuple[float, ...] = field(default_factory=tuple)


class SpectrumStack:
    """Stacked spectra sharing one x channel and one y channel.

    Args:
        x_key: Channel plotted horizontally.
        y_key: Channel plotted vertically.
        offset: Vertical shift between consecutive spectra; ``config.stack_offset``
            when omitted.
        config: Shared defaults. Defaults to ``ExplorerConfig()``.
    """

    def __init__(
        self,
        x_key: str | None = None,
        y_key: str | None = None,
        offset: float | None = None,
        config: ExplorerConfig | None = None,
    ):
        self.config = config if config is not None else ExplorerConfig()
        self.x_key = x_key
        self.y_key = y_key
        self.offset = self.config.stack_offset if offset is None else offset
        self._entries: list[tuple[Spectrum, SpectrumMeta]] = []

    def append(self, spectrum: Spectrum, meta: SpectrumMeta) -> None:
        """Add a spectrum on top of the stack.

        If it lacks the current x or y channel, both keys are reset to None
        until :meth:`set_keys` is called again.
        """
        if self.x_key not in spectrum or self.y_key not in spectrum:
            if self.x_key is not None or self.y_key is not None:
                logger.info(
                    f"Spectrum {meta.id} lacks channels ({self.x_key}, {self.y_key}); resetting plotted channels"
                )
            self.x_key = None
            self.y_key = None
        self._entries.append(({k: list(v) for k, v in spectrum.items()}, meta))

    def remove(self, spectrum_id: int) -> int:
        """Remove every spectrum with the given id; return how many were removed."""
        before = len(self._entries)
        self._entries = [(s, m) for s, m in self._entries if m.id != spectrum_id]
        return before - len(self._entries)

    def set_keys(self, x_key: str, y_key: str) -> None:
        self.x_key = x_key
        self.y_key = y_key

    def set_offset(self, offset: float) -> None:
        self.offset = offset

    @property
    def metas(self) -> list[SpectrumMeta]:
        return [m for _, m in self._entries]

    def series(self, index: int) -> tuple[np.ndarray, np.ndarray] | None:
        """Paired (x, shifted y) arrays of one spectrum, None if unavailable."""
        if not 0 <= index < len(self._entries) or self.x_key is None or self.y_key is None:
            return None
        spectrum, _ = self._entries[index]
        if self.x_key not in spectrum or self.y_key not in spectrum:
            return None
        x = np.asarray(spectrum[self.x_key], dtype=float)
        y = np.asarray(spectrum[self.y_key], dtype=float) + index * self.offset
        n = min(x.size, y.size)
        return x[:n], y[:n]

    def extents(self) -> tuple[Range, Range] | None:
        """Common (x_range, y_range) of all shifted series.

        None when the stack is empty, channels are unset, or no spectrum has
        readings.
        """
        x_low, x_high = np.inf, -np.inf
        y_low, y_high = np.inf, -np.inf
        for i in range(len(self._entries)):
            pair = self.series(i)
            if pair is None or pair[0].size == 0:
                continue
            x, y = pair
            x_low, x_high = min(x_low, x.min()), max(x_high, x.max())
            y_low, y_high = min(y_low, y.min()), max(y_high, y.max())
        if not np.isfinite(x_low):
            return None
        return (float(x_low), float(x_high)), (float(y_low), float(y_high))

    def tooltip(self, index: int) -> list[str]:
        """``"element: component"`` lines describing one spectrum."""
        if not 0 <= index < len(self._entries):
            return []
        meta = self._entries[index][1]
        return [f"{element}: {component}" for element, component in zip(meta.elements, meta.components)]

    def __len__(self) -> int:
        return len(self._entries)


def meta_from_composition(spectrum_id: int, composition: Sequence[tuple[str, float]] | dict[str, float]) -> SpectrumMeta:
    """Build a :class:`SpectrumMeta` from a composition mapping or pairs."""
    items = list(composition.items()) if isinstance(composition, dict) else list(composition)
    return SpectrumMeta(
        id=spectrum_id,
        elements=tuple(e for e, _ in items),
        components=tuple(float(c) for _, c in items),
    )
