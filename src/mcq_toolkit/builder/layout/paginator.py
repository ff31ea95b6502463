"""
Module: builder.layout.paginator

Purpose:
    Split an ordered item list across a page budget as evenly as
    possible by computing where hard page breaks go.

Key Functions:
    - plan_breaks(): Main break planning function

Algorithm:
    For k = 1 .. P-1 the k-th page ends after item floor(N * k / P) - 1.
    Indices are clamped into [0, N-2] and de-duplicated, so fewer items
    than pages collapses to fewer breaks instead of empty pages or an
    out-of-range break. No break ever follows the last item.

Dependencies:
    - builder.layout.models: PageBreakPlan

Used By:
    - builder.layout.composer: compose_paper()
"""

from __future__ import annotations

import logging

from .models import PageBreakPlan

logger = logging.getLogger(__name__)


def plan_breaks(item_count: int, target_page_count: int = 2) -> PageBreakPlan:
    """
    Compute page breaks for ``item_count`` items over ``target_page_count`` pages.

    Args:
        item_count: Number of items (negative treated as 0)
        target_page_count: Page budget (>= 1)

    Returns:
        PageBreakPlan with min(P-1, N-1) breaks (none for N <= 1)

    Raises:
        ValueError: If target_page_count < 1

    Example:
        >>> plan_breaks(10, 2).break_after_indices
        (4,)
        >>> plan_breaks(3, 5).break_after_indices
        (0, 1)
    """
    if target_page_count < 1:
        raise ValueError(f"target_page_count must be >= 1: {target_page_count}")

    if item_count <= 1 or target_page_count == 1:
        return PageBreakPlan(target_page_count=target_page_count)

    last_allowed = item_count - 2
    indices = set()
    for k in range(1, target_page_count):
        index = (item_count * k) // target_page_count - 1
        indices.add(min(max(index, 0), last_allowed))

    plan = PageBreakPlan(
        target_page_count=target_page_count,
        break_after_indices=tuple(sorted(indices)),
    )
    logger.debug(
        f"Planned breaks after {list(plan.break_after_indices)} for "
        f"{item_count} items over {target_page_count} pages"
    )
    return plan
