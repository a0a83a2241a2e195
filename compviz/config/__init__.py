"""
Configuration module for compviz.

Provides the ExplorerConfig dataclass holding shared tolerances and layout
parameters, and a loader for JSON/YAML configuration files.
"""

from compviz.config.explorer_config import EPSILON, ExplorerConfig, load_config

__all__ = [
    'EPSILON',
    'ExplorerConfig',
    'load_config',
]
