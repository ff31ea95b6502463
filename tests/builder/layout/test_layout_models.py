"""
Tests for builder.layout.models

Test Coverage:
- PageBreakPlan validation and partitioning
- DensityLevel ordering and slugs
- LayoutTier derived properties
"""
from pathlib import Path

import pytest

from mcq_toolkit.builder.layout.models import (
    Branding,
    DensityLevel,
    LayoutTier,
    OptionArrangement,
    PageBreakPlan,
)


class TestPageBreakPlan:
    """Validation on construction."""

    def test_page_break_plan_when_not_increasing_then_raises(self):
        with pytest.raises(ValueError, match="strictly increasing"):
            PageBreakPlan(target_page_count=4, break_after_indices=(3, 3))

    def test_page_break_plan_when_negative_index_then_raises(self):
        with pytest.raises(ValueError, match="non-negative"):
            PageBreakPlan(target_page_count=2, break_after_indices=(-1,))

    def test_page_break_plan_when_too_many_breaks_then_raises(self):
        """At most P - 1 breaks fit a budget of P pages."""
        with pytest.raises(ValueError, match="exceed page budget"):
            PageBreakPlan(target_page_count=2, break_after_indices=(1, 3))

    def test_page_break_plan_when_zero_pages_then_raises(self):
        with pytest.raises(ValueError, match="target_page_count"):
            PageBreakPlan(target_page_count=0)

    def test_page_break_plan_when_empty_then_single_page(self):
        plan = PageBreakPlan(target_page_count=3)

        assert plan.page_count == 1
        assert not plan.breaks_after(0)
        assert plan.partition([1, 2]) == [[1, 2]]

    def test_partition_when_breaks_then_splits_after_each_index(self):
        plan = PageBreakPlan(target_page_count=3, break_after_indices=(1, 2))

        assert plan.partition("abcde") == [["a", "b"], ["c"], ["d", "e"]]
        assert plan.breaks_after(1)
        assert plan.breaks_after(2)
        assert not plan.breaks_after(3)


class TestDensityLevel:
    """Ordering and naming."""

    def test_density_level_when_compared_then_ordered_by_density(self):
        assert DensityLevel.SPARSE < DensityLevel.NORMAL < DensityLevel.COMPACT < DensityLevel.ULTRA_COMPACT

    def test_slug_when_multiword_then_hyphenated(self):
        assert DensityLevel.ULTRA_COMPACT.slug == "ultra-compact"
        assert DensityLevel.SPARSE.slug == "sparse"


def test_layout_tier_when_built_then_leading_and_inline_derived():
    """leading_pt is font size times line height."""
    tier = LayoutTier(
        density_level=DensityLevel.COMPACT,
        font_size_pt=12.0,
        line_height_ratio=1.25,
        inter_item_spacing_pt=5.0,
        option_arrangement=OptionArrangement.INLINE_FLOW,
    )

    assert tier.leading_pt == pytest.approx(15.0)
    assert tier.is_inline


def test_branding_when_logo_given_as_string_then_path():
    branding = Branding(logo_path="assets/logo.png")

    assert branding.logo_path == Path("assets/logo.png")
    assert Branding().logo_path is None
