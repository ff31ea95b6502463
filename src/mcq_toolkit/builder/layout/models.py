"""
Module: builder.layout.models

Purpose:
    Value objects produced by the layout policy.
    Immutable dataclasses describing the chosen density tier and the
    partition of items across pages.

Key Classes:
    - DensityLevel: Ordered density buckets
    - OptionArrangement: How options are laid out under a question
    - LayoutTier: Rendering parameters chosen for one render call
    - PageBreakPlan: Break indices partitioning items into pages
    - Branding: Institution/header/footer wording and optional logo

Dependencies:
    - dataclasses (std)
    - enum (std)

Used By:
    - builder.layout.classifier: Creates LayoutTier
    - builder.layout.paginator: Creates PageBreakPlan
    - builder.layout.composer: Consumes both
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum
from pathlib import Path
from typing import List, Optional, Sequence, Tuple, TypeVar

T = TypeVar("T")


class DensityLevel(IntEnum):
    """Density tiers ordered by increasing information density."""

    SPARSE = 0
    NORMAL = 1
    COMPACT = 2
    ULTRA_COMPACT = 3

    @property
    def slug(self) -> str:
        """Lowercase hyphenated name, e.g. ``ultra-compact``."""
        return self.name.lower().replace("_", "-")


class OptionArrangement(str, Enum):
    """Option layout under a question."""

    STACKED_TWO_COLUMN = "stacked-two-column"
    INLINE_FLOW = "inline-flow"


@dataclass(frozen=True)
class LayoutTier:
    """
    Rendering parameters for one render call (immutable).

    Attributes:
        density_level: Selected density bucket
        font_size_pt: Body font size in points
        line_height_ratio: Line height as a multiple of the font size
        inter_item_spacing_pt: Vertical gap between questions in points
        option_arrangement: Stacked two-column grid or inline flow

    Example:
        >>> tier = classify(10, 40.0, 2)
        >>> tier.density_level
        <DensityLevel.SPARSE: 0>
    """

    density_level: DensityLevel
    font_size_pt: float
    line_height_ratio: float
    inter_item_spacing_pt: float
    option_arrangement: OptionArrangement

    @property
    def leading_pt(self) -> float:
        """Baseline-to-baseline distance in points."""
        return self.font_size_pt * self.line_height_ratio

    @property
    def is_inline(self) -> bool:
        """True when options flow on one line."""
        return self.option_arrangement is OptionArrangement.INLINE_FLOW


@dataclass(frozen=True)
class PageBreakPlan:
    """
    Partition of an ordered item list across pages.

    A hard page break goes immediately after every item listed in
    ``break_after_indices``.

    Attributes:
        target_page_count: Caller's page budget (>= 1)
        break_after_indices: Strictly increasing zero-based indices

    Example:
        >>> plan = PageBreakPlan(target_page_count=2, break_after_indices=(4,))
        >>> plan.page_count
        2
    """

    target_page_count: int
    break_after_indices: Tuple[int, ...] = ()

    def __post_init__(self) -> None:
        """Validate plan on construction."""
        if self.target_page_count < 1:
            raise ValueError(f"target_page_count must be >= 1: {self.target_page_count}")
        indices = self.break_after_indices
        if any(b <= a for a, b in zip(indices, indices[1:])):
            raise ValueError(f"break_after_indices must be strictly increasing: {indices}")
        if indices and indices[0] < 0:
            raise ValueError(f"break_after_indices must be non-negative: {indices}")
        if len(indices) > self.target_page_count - 1:
            raise ValueError(
                f"{len(indices)} breaks exceed page budget of {self.target_page_count}"
            )

    @property
    def page_count(self) -> int:
        """Number of pages the items are split into."""
        return len(self.break_after_indices) + 1

    def breaks_after(self, index: int) -> bool:
        """True if a page break follows the item at ``index``."""
        return index in self.break_after_indices

    def partition(self, items: Sequence[T]) -> List[List[T]]:
        """Split ``items`` into per-page lists, preserving order."""
        pages: List[List[T]] = []
        start = 0
        for index in self.break_after_indices:
            pages.append(list(items[start:index + 1]))
            start = index + 1
        pages.append(list(items[start:]))
        return pages


@dataclass(frozen=True)
class Branding:
    """
    Fixed wording printed around the questions.

    Attributes:
        institution_name: Printed at the top of the header
        paper_title: Prefix of the subject line
        end_message: Footer text after the last question
        student_fields: Labels of fillable identity fields
        logo_path: Image shown beside the institution name, None for no logo
    """

    institution_name: str = "GOVT. DEGREE COLLEGE HINGORJA"
    paper_title: str = "Test Paper"
    end_message: str = "*** END OF PAPER *** BEST OF LUCK!"
    student_fields: Tuple[str, ...] = ("STUDENT NAME", "SECTION")
    logo_path: Optional[Path] = None

    def __post_init__(self) -> None:
        if self.logo_path is not None and not isinstance(self.logo_path, Path):
            object.__setattr__(self, "logo_path", Path(self.logo_path))
