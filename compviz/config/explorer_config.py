"""Configuration for composition exploration.

Provides a single, typed entry point for the tolerances and layout
parameters shared by the data layer, plus loaders for JSON and YAML files.
"""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

import yaml

from compviz.core.exceptions import ConfigError
from compviz.core.logging import get_logger

logger = get_logger(__name__)

EPSILON = 1e-6


@dataclass
class ExplorerConfig:
    """Tolerances and layout parameters.

    Attributes:
        epsilon: Tolerance for every fraction or constant-value comparison.
        n_shells: Number of concentric shells produced by the quaternary
            decomposition.
        shell_spacing: Minimum-fraction offset between consecutive shells.
        subplots_per_shell: Ternary sub-diagrams per shell (1 to 4).
        num_rows: Heat-map rows per slope branch.
        separate_slope: Split heat-map rows into ascending and descending
            branches.
        label_decimals: Decimals in heat-map row labels.
        composition_decimals: Decimals in composition column labels.
        stack_offset: Vertical offset between stacked spectra.
        fallback_axis_label: Label returned for unknown axes.
    """

    epsilon: float = EPSILON
    n_shells: int = 3
    shell_spacing: float = 0.1
    subplots_per_shell: int = 4
    num_rows: int = 10
    separate_slope: bool = False
    label_decimals: int = 2
    composition_decimals: int = 1
    stack_offset: float = 0.1
    fallback_axis_label: str = "X"

    def validate(self) -> ExplorerConfig:
        """Check parameter ranges.

        Returns:
            self, to allow chaining.

        Raises:
            ValueError: If a parameter is out of range.
        """
        if self.epsilon <= 0:
            raise ValueError(f"epsilon must be positive, got {self.epsilon}")
        if self.n_shells < 0:
            raise ValueError(f"n_shells must be >= 0, got {self.n_shells}")
        if self.shell_spacing < 0:
            raise ValueError(f"shell_spacing must be >= 0, got {self.shell_spacing}")
        if not 1 <= self.subplots_per_shell <= 4:
            raise ValueError(
                f"subplots_per_shell must be between 1 and 4, got {self.subplots_per_shell}"
            )
        if self.num_rows < 1:
            raise ValueError(f"num_rows must be >= 1, got {self.num_rows}")
        if self.label_decimals < 0 or self.composition_decimals < 0:
            raise ValueError("Label decimals must be >= 0")
        return self

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> ExplorerConfig:
        """Build a config from a mapping, ignoring unknown keys."""
        known = {f.name for f in fields(cls)}
        unknown = sorted(set(values) - known)
        if unknown:
            logger.warning(f"Ignoring unknown configuration keys: {', '.join(unknown)}")
        return cls(**{k: v for k, v in values.items() if k in known}).validate()

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def load_config(definition: str | Path | Mapping[str, Any] | None = None) -> ExplorerConfig:
    """Load an :class:`ExplorerConfig`.

    Args:
        definition: ``None`` for defaults, a mapping, a path to a ``.json``,
            ``.yaml`` or ``.yml`` file, or an inline JSON/YAML string.

    Returns:
        The validated configuration.

    Raises:
        ConfigError: If the file is missing, unparsable, or holds invalid values.
    """
    if definition is None:
        return ExplorerConfig()
    if isinstance(definition, Mapping):
        return _from_mapping(definition)

    text = str(definition)
    if text.endswith((".json", ".yaml", ".yml")):
        path = Path(text)
        if not path.is_file():
            raise ConfigError(f"Configuration file {text} does not exist.")
        try:
            with open(path, "r", encoding="utf-8") as f:
                if text.endswith(".json"):
                    values = json.load(f)
                else:
                    values = yaml.safe_load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as exc:
            raise ConfigError(f"Invalid configuration file: {text}") from exc
    else:
        try:
            values = yaml.safe_load(text)
        except yaml.YAMLError as exc:
            raise ConfigError("Invalid configuration string. Must be valid JSON or YAML.") from exc

    if values is None:
        return ExplorerConfig()
    if not isinstance(values, Mapping):
        raise ConfigError("Configuration must be a mapping of parameter names to values.")
    return _from_mapping(values)


def _from_mapping(values: Mapping[str, Any]) -> ExplorerConfig:
    try:
        return ExplorerConfig.from_dict(values)
    except (TypeError, ValueError) as exc:
        raise ConfigError(str(exc)) from exc
