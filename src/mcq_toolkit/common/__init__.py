"""Shared constants and thresholds."""

from .thresholds import DENSITY_THRESHOLDS, DensityThresholds, TierStyle

__all__ = ["DENSITY_THRESHOLDS", "DensityThresholds", "TierStyle"]
