"""Centralized layout thresholds and tier styles.

All density boundaries, the option verbosity cut-off and the rendering
parameters of each density tier live here, so they can be retuned
without touching the classifier.
"""

from __future__ import annotations

from dataclasses import dataclass, field


@dataclass(frozen=True)
class TierStyle:
    """Rendering parameters for one density tier."""

    font_size_pt: float
    line_height_ratio: float
    inter_item_spacing_pt: float

    def __post_init__(self) -> None:
        if self.font_size_pt <= 0:
            raise ValueError(f"font_size_pt must be positive: {self.font_size_pt}")
        if self.line_height_ratio < 1.0:
            raise ValueError(f"line_height_ratio must be >= 1.0: {self.line_height_ratio}")
        if self.inter_item_spacing_pt < 0:
            raise ValueError(f"inter_item_spacing_pt must be non-negative: {self.inter_item_spacing_pt}")

    def dominates(self, other: TierStyle) -> bool:
        """True if no parameter of ``other`` is larger than this one."""
        return (
            self.font_size_pt >= other.font_size_pt
            and self.line_height_ratio >= other.line_height_ratio
            and self.inter_item_spacing_pt >= other.inter_item_spacing_pt
        )


@dataclass(frozen=True)
class DensityThresholds:
    """
    Density tier boundaries (immutable).

    Item capacities are calibrated against ``calibration_pages`` pages and
    scaled linearly with the caller's page budget, so the defaults mean
    "15 / 30 / 50 questions fit a two-sided paper at sparse / normal /
    compact density".

    Attributes:
        sparse_max_items: Max items rendered at sparse density
        normal_max_items: Max items rendered at normal density
        compact_max_items: Max items rendered at compact density
        calibration_pages: Page budget the item counts refer to
        verbosity_threshold: Average item weight (chars) above which
            compact density falls back to stacked options
        sparse/normal/compact/ultra_compact: Style of each tier
    """

    sparse_max_items: int = 15
    normal_max_items: int = 30
    compact_max_items: int = 50
    calibration_pages: int = 2
    verbosity_threshold: float = 50.0

    sparse: TierStyle = field(default_factory=lambda: TierStyle(15.0, 1.6, 12.0))
    normal: TierStyle = field(default_factory=lambda: TierStyle(13.5, 1.4, 8.0))
    compact: TierStyle = field(default_factory=lambda: TierStyle(12.0, 1.2, 5.0))
    ultra_compact: TierStyle = field(default_factory=lambda: TierStyle(10.5, 1.1, 3.0))

    def __post_init__(self) -> None:
        """Validate ordering of boundaries and monotonic tier styles."""
        if self.calibration_pages < 1:
            raise ValueError(f"calibration_pages must be >= 1: {self.calibration_pages}")
        if not (0 < self.sparse_max_items < self.normal_max_items < self.compact_max_items):
            raise ValueError(
                "Item boundaries must satisfy 0 < sparse < normal < compact: "
                f"{self.sparse_max_items}, {self.normal_max_items}, {self.compact_max_items}"
            )
        if self.verbosity_threshold < 0:
            raise ValueError(f"verbosity_threshold must be non-negative: {self.verbosity_threshold}")
        styles = (self.sparse, self.normal, self.compact, self.ultra_compact)
        for looser, denser in zip(styles, styles[1:]):
            if not looser.dominates(denser):
                raise ValueError(
                    f"Tier styles must not grow with density: {looser} -> {denser}"
                )

    def capacity(self, max_items: int, target_page_count: int) -> float:
        """Scale a calibrated item boundary to ``target_page_count`` pages."""
        return max_items * target_page_count / self.calibration_pages


# Global default instance
DENSITY_THRESHOLDS = DensityThresholds()
