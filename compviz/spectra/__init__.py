"""Spectrum collections for line display."""

from compviz.spectra.stack import SpectrumMeta, SpectrumStack, meta_from_composition

__all__ = ["SpectrumMeta", "SpectrumStack", "meta_from_composition"]
