"""
Module: builder.layout.classifier

Purpose:
    Map content volume onto a discrete density tier.

Key Functions:
    - classify(): Pick the LayoutTier for an item count and page budget

Algorithm:
    1. Scale each calibrated item boundary to the caller's page budget
    2. Pick the first tier (sparse → normal → compact) whose capacity
       holds the item count; otherwise fall to ultra-compact
    3. Choose the option arrangement:
       - sparse/normal: stacked two-column
       - compact: inline, unless items are verbose (stacked)
       - ultra-compact: always inline

Dependencies:
    - common.thresholds: DensityThresholds
    - builder.layout.models: LayoutTier

Used By:
    - builder.layout.composer: compose_paper()
"""

from __future__ import annotations

import logging
from typing import Optional

from mcq_toolkit.common.thresholds import DENSITY_THRESHOLDS, DensityThresholds, TierStyle

from .models import DensityLevel, LayoutTier, OptionArrangement

logger = logging.getLogger(__name__)


def classify(
    item_count: int,
    average_weight: float,
    target_page_count: int = 2,
    thresholds: Optional[DensityThresholds] = None,
) -> LayoutTier:
    """
    Select the density tier for a render call.

    Args:
        item_count: Number of questions to render
        average_weight: Mean item weight in characters
        target_page_count: Page budget (>= 1)
        thresholds: Tier boundaries and styles (defaults to DENSITY_THRESHOLDS)

    Returns:
        Fresh LayoutTier

    Raises:
        ValueError: If target_page_count < 1

    Example:
        >>> classify(45, 20.0, 2).density_level
        <DensityLevel.COMPACT: 2>
    """
    if target_page_count < 1:
        raise ValueError(f"target_page_count must be >= 1: {target_page_count}")

    t = thresholds or DENSITY_THRESHOLDS
    if item_count <= 0:
        item_count = 0
        average_weight = 0.0

    level = _select_level(item_count, target_page_count, t)
    arrangement = _select_arrangement(level, average_weight, t)
    style = _style_for(level, t)

    logger.debug(
        f"Classified {item_count} items (avg {average_weight:.1f} chars, "
        f"{target_page_count} pages) as {level.slug} / {arrangement.value}"
    )

    return LayoutTier(
        density_level=level,
        font_size_pt=style.font_size_pt,
        line_height_ratio=style.line_height_ratio,
        inter_item_spacing_pt=style.inter_item_spacing_pt,
        option_arrangement=arrangement,
    )


def _select_level(
    item_count: int,
    target_page_count: int,
    t: DensityThresholds,
) -> DensityLevel:
    """First tier whose scaled capacity holds ``item_count``."""
    boundaries = (
        (DensityLevel.SPARSE, t.sparse_max_items),
        (DensityLevel.NORMAL, t.normal_max_items),
        (DensityLevel.COMPACT, t.compact_max_items),
    )
    for level, max_items in boundaries:
        if item_count <= t.capacity(max_items, target_page_count):
            return level
    return DensityLevel.ULTRA_COMPACT


def _select_arrangement(
    level: DensityLevel,
    average_weight: float,
    t: DensityThresholds,
) -> OptionArrangement:
    """Option arrangement for a tier, with the compact verbosity override."""
    if level is DensityLevel.ULTRA_COMPACT:
        return OptionArrangement.INLINE_FLOW
    if level is DensityLevel.COMPACT:
        if average_weight > t.verbosity_threshold:
            return OptionArrangement.STACKED_TWO_COLUMN
        return OptionArrangement.INLINE_FLOW
    return OptionArrangement.STACKED_TWO_COLUMN


def _style_for(level: DensityLevel, t: DensityThresholds) -> TierStyle:
    """Look up the configured style of a tier."""
    return {
        DensityLevel.SPARSE: t.sparse,
        DensityLevel.NORMAL: t.normal,
        DensityLevel.COMPACT: t.compact,
        DensityLevel.ULTRA_COMPACT: t.ultra_compact,
    }[level]
