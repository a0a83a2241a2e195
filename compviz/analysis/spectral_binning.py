"""Binning of irregular spectra into a regular heat-map grid.

Every spectrum is a set of index-aligned channels. One channel (the binning
channel) decides in which row a reading falls; another (the value channel)
supplies the value aggregated per row. Rows split the global range of the
binning channel into equal-width intervals. With slope separation, readings
taken while the binning channel decreases go to a second, mirrored half of
the rows, so that sweeps up and down are displayed apart.

Per spectrum and row, the aggregate is the element at position ``n // 2``
of the sorted values, i.e. the upper middle for even counts. Rows without
readings are holes (NaN).
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import numpy as np

from compviz.config.explorer_config import ExplorerConfig
from compviz.core.diagnostics import DiagnosticCode, Diagnostics
from compviz.core.logging import get_logger
from compviz.data.types import Sample, Spectrum

logger = get_logger(__name__)

SamplePair = tuple[Sample, Spectrum]


@dataclass
class HeatMapGrid:
    """Dense heat-map grid.

    Attributes:
        row_labels: One label per row; ascending rows first when slopes
            are separated.
        column_labels: One composition label per spectrum.
        matrix: ``(n_spectra, n_rows)`` array of aggregates, NaN for holes.
        index_maps: ``index_maps[i][r]`` lists the reading indices of
            spectrum ``i`` assigned to row ``r``.
        y_range: Global (min, max) of the binning channel, None if empty.
        spacing: Row width in binning-channel units.
    """

    row_labels: list[str] = field(default_factory=list)
    column_labels: list[str] = field(default_factory=list)
    matrix: np.ndarray = field(default_factory=lambda: np.empty((0, 0)))
    index_maps: list[list[list[int]]] = field(default_factory=list)
    y_range: tuple[float, float] | None = None
    spacing: float = 0.0

    @property
    def shape(self) -> tuple[int, int]:
        return self.matrix.shape

    def has_value(self, spectrum: int, row: int) -> bool:
        """False for holes and out-of-range positions."""
        n_spectra, n_rows = self.matrix.shape
        if not (0 <= spectrum < n_spectra and 0 <= row < n_rows):
            return False
        return not np.isnan(self.matrix[spectrum, row])

    def to_dict(self) -> dict[str, Any]:
        """JSON-friendly representation with ``None`` for holes."""
        return {
            "rows": list(self.row_labels),
            "columns": list(self.column_labels),
            "values": [[None if np.isnan(v) else float(v) for v in row] for row in self.matrix],
        }


def median_upper(values: Sequence[float]) -> float:
    """Sorted element at position ``len // 2``, NaN for an empty sequence."""
    if len(values) == 0:
        return np.nan
    return float(np.sort(np.asarray(values, dtype=float))[len(values) // 2])


def format_fixed(value: float, decimals: int) -> str:
    """Fixed-point text of ``value`` with exact ties rounded away from zero.

    ``0.25`` gives ``"0.3"`` at one decimal; ``1.005`` gives ``"1.00"`` at two
    since its binary value lies below the tie.
    """
    quantized = Decimal(float(value)).quantize(Decimal(1).scaleb(-decimals), rounding=ROUND_HALF_UP)
    if quantized.is_zero():
        quantized = abs(quantized)
    return f"{quantized:f}"


def composition_label(sample: Sample, decimals: int = 1) -> str:
    """``"Fe: 0.2, Co: 0.4"`` in composition order."""
    return ", ".join(
        f"{element[:1].upper()}{element[1:]}: {format_fixed(fraction, decimals)}"
        for element, fraction in sample.composition.items()
    )


def row_labels(
    min_y: float,
    max_y: float,
    num_rows: int,
    separate_slope: bool,
    decimals: int = 2,
) -> list[str]:
    spacing = (max_y - min_y) / num_rows
    if not separate_slope:
        return [format_fixed(min_y + j * spacing, decimals) for j in range(num_rows)]
    ascending = [f"{format_fixed(min_y + j * spacing, decimals)} (+)" for j in range(num_rows)]
    descending = [f"{format_fixed(max_y - (j + 1) * spacing, decimals)} (-)" for j in range(num_rows)]
    return ascending + descending


def assign_rows(
    y: np.ndarray,
    min_y: float,
    spacing: float,
    num_rows: int,
    separate_slope: bool,
) -> np.ndarray:
    """Row index of every reading of one spectrum."""
    scale = spacing if spacing > 0 else 1.0
    # Half-up rounding, ties go to the upper row.
    idx = np.floor((y - min_y) / scale + 0.5).astype(int)
    idx = np.clip(idx, 0, num_rows - 1)
    if separate_slope and y.size > 1:
        descending = np.zeros(y.size, dtype=bool)
        descending[1:] = ~(y[1:] >= y[:-1])
        idx = np.where(descending, 2 * num_rows - idx - 1, idx)
    return idx


class SpectralBinner:
    """Computes :class:`HeatMapGrid` objects from (sample, spectrum) pairs.

    Args:
        config: Source of default ``num_rows``, ``separate_slope`` and label
            precision.
    """

    def __init__(self, config: ExplorerConfig | None = None) -> None:
        self.config = config if config is not None else ExplorerConfig()

    def compute_grid(
        self,
        pairs: Iterable[SamplePair],
        binning_channel: str,
        value_channel: str,
        num_rows: int | None = None,
        separate_slope: bool | None = None,
        diagnostics: Diagnostics | None = None,
    ) -> HeatMapGrid:
        """Bin every spectrum into rows of the binning channel.

        Spectra lacking one of the two channels, or whose channels differ in
        length, keep a column of holes and are reported as
        ``MISSING_CHANNEL``.

        Raises:
            ValueError: If ``num_rows`` is below 1.
        """
        num_rows = self.config.num_rows if num_rows is None else num_rows
        separate_slope = self.config.separate_slope if separate_slope is None else separate_slope
        if num_rows < 1:
            raise ValueError(f"num_rows must be >= 1, got {num_rows}")
        if diagnostics is None:
            diagnostics = Diagnostics()

        pairs = [(_as_sample(sample), spectrum) for sample, spectrum in pairs]
        n_rows = 2 * num_rows if separate_slope else num_rows
        columns = [composition_label(s, self.config.composition_decimals) for s, _ in pairs]

        channels: list[tuple[np.ndarray, np.ndarray] | None] = []
        for i, (_, spectrum) in enumerate(pairs):
            channels.append(self._channels(i, spectrum, binning_channel, value_channel, diagnostics))

        finite = [y[np.isfinite(y)] for y, _ in filter(None, channels)]
        finite = [y for y in finite if y.size]
        if not finite:
            diagnostics.add(
                DiagnosticCode.EMPTY_INPUT,
                f"No readings of channel '{binning_channel}' to bin",
                log=logger,
                channel=binning_channel,
            )
            return HeatMapGrid(
                column_labels=columns,
                matrix=np.full((len(pairs), 0), np.nan),
                index_maps=[[] for _ in pairs],
            )

        min_y = float(min(y.min() for y in finite))
        max_y = float(max(y.max() for y in finite))
        spacing = (max_y - min_y) / num_rows

        matrix = np.full((len(pairs), n_rows), np.nan)
        index_maps: list[list[list[int]]] = []
        for i, pair_channels in enumerate(channels):
            rows: list[list[int]] = [[] for _ in range(n_rows)]
            if pair_channels is not None:
                y, z = pair_channels
                for j, row in enumerate(assign_rows(y, min_y, spacing, num_rows, separate_slope)):
                    if np.isfinite(y[j]):
                        rows[row].append(j)
                for r, indices in enumerate(rows):
                    matrix[i, r] = median_upper(z[indices])
            index_maps.append(rows)

        logger.debug(
            f"Binned {len(pairs)} spectra into {n_rows} rows over [{min_y:g}, {max_y:g}]"
        )
        return HeatMapGrid(
            row_labels=row_labels(min_y, max_y, num_rows, separate_slope, self.config.label_decimals),
            column_labels=columns,
            matrix=matrix,
            index_maps=index_maps,
            y_range=(min_y, max_y),
            spacing=spacing,
        )

    @staticmethod
    def _channels(
        index: int,
        spectrum: Spectrum,
        binning_channel: str,
        value_channel: str,
        diagnostics: Diagnostics,
    ) -> tuple[np.ndarray, np.ndarray] | None:
        missing = [c for c in (binning_channel, value_channel) if c not in spectrum]
        if missing:
            diagnostics.add(
                DiagnosticCode.MISSING_CHANNEL,
                f"Spectrum {index} has no channel {', '.join(repr(c) for c in missing)}; skipped",
                log=logger,
                spectrum=index,
                channels=tuple(missing),
            )
            return None
        y = np.asarray(spectrum[binning_channel], dtype=float)
        z = np.asarray(spectrum[value_channel], dtype=float)
        if y.shape != z.shape:
            diagnostics.add(
                DiagnosticCode.MISSING_CHANNEL,
                f"Spectrum {index}: channels '{binning_channel}' and '{value_channel}' "
                f"have different lengths ({y.size} != {z.size}); skipped",
                log=logger,
                spectrum=index,
                channels=(binning_channel, value_channel),
            )
            return None
        return y, z


def compute_grid(
    pairs: Iterable[SamplePair],
    binning_channel: str,
    value_channel: str,
    num_rows: int = 10,
    separate_slope: bool = False,
    diagnostics: Diagnostics | None = None,
) -> HeatMapGrid:
    """Functional shortcut for :meth:`SpectralBinner.compute_grid`."""
    return SpectralBinner().compute_grid(
        pairs,
        binning_channel,
        value_channel,
        num_rows=num_rows,
        separate_slope=separate_slope,
        diagnostics=diagnostics,
    )


class HeatMapDataset:
    """Stateful heat-map source: spectra, channel registry and settings.

    Args:
        config: Default rows, slope separation and label precision.
        diagnostics: Collector for recoverable conditions.
    """

    def __init__(self, config: ExplorerConfig | None = None, diagnostics: Diagnostics | None = None) -> None:
        self.config = config if config is not None else ExplorerConfig()
        self.diagnostics = diagnostics if diagnostics is not None else Diagnostics()
        self._pairs: list[SamplePair] = []
        self._channels: dict[str, None] = {}
        self._active: list[str | None] = [None, None]
        self.num_rows = self.config.num_rows
        self.separate_slope = self.config.separate_slope

    def set_data(self, pairs: Iterable[tuple[Sample | Mapping[str, Any], Spectrum]] = ()) -> None:
        """Replace the spectra and rebuild the channel registry.

        Active channels missing from the new registry are cleared and
        reported as ``UNKNOWN_CHANNEL``.
        """
        self._pairs = [(_as_sample(s), {k: list(v) for k, v in spectrum.items()}) for s, spectrum in pairs]
        self._channels = {}
        for _, spectrum in self._pairs:
            for key in spectrum:
                self._channels.setdefault(key, None)

        for i, key in enumerate(self._active):
            if key is not None and key not in self._channels:
                self._active[i] = None
                self.diagnostics.add(
                    DiagnosticCode.UNKNOWN_CHANNEL,
                    f"Active channel {key} is not present in the new spectra",
                    log=logger,
                    channel=key,
                    slot=i,
                )

    @property
    def pairs(self) -> list[SamplePair]:
        return list(self._pairs)

    def channels(self) -> list[str]:
        return list(self._channels)

    @property
    def active_channels(self) -> tuple[str | None, str | None]:
        return self._active[0], self._active[1]

    def set_active_channels(self, keys: Sequence[str | None]) -> None:
        """Select the (binning, value) channels.

        Unknown names keep the previous selection of their slot and are
        reported as ``UNKNOWN_CHANNEL``.
        """
        for i, key in enumerate(keys[:2]):
            if key in self._channels:
                self._active[i] = key
            else:
                self.diagnostics.add(
                    DiagnosticCode.UNKNOWN_CHANNEL,
                    f"Unable to set {key} as active channel",
                    log=logger,
                    channel=key,
                    slot=i,
                )

    def set_num_rows(self, n: int = 10) -> None:
        if n < 1:
            raise ValueError(f"num_rows must be >= 1, got {n}")
        self.num_rows = n

    def set_separate_slope(self, flag: bool) -> None:
        self.separate_slope = bool(flag)

    def compute(self) -> HeatMapGrid:
        """Grid for the current spectra, channels and settings."""
        binning, value = self._active
        if binning is None or value is None:
            self.diagnostics.add(
                DiagnosticCode.UNKNOWN_CHANNEL,
                "Active channels are not set; nothing to bin",
                log=logger,
                channels=(binning, value),
            )
            return HeatMapGrid(
                column_labels=[composition_label(s, self.config.composition_decimals) for s, _ in self._pairs],
                matrix=np.full((len(self._pairs), 0), np.nan),
                index_maps=[[] for _ in self._pairs],
            )
        return SpectralBinner(self.config).compute_grid(
            self._pairs,
            binning,
            value,
            num_rows=self.num_rows,
            separate_slope=self.separate_slope,
            diagnostics=self.diagnostics,
        )


def _as_sample(sample: Sample | Mapping[str, Any]) -> Sample:
    return sample.copy() if isinstance(sample, Sample) else Sample.from_dict(sample)
