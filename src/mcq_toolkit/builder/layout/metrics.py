"""
Module: builder.layout.metrics

Purpose:
    Content weight of questions, used as a proxy for rendered height.
    Weights are only aggregated; they never reorder items.

Key Functions:
    - score(): Weight of a single item
    - total_weight(): Sum over items
    - average_weight(): Mean weight, 0.0 for no items
"""

from __future__ import annotations

from typing import Sequence

from mcq_toolkit.core.models import QuestionItem


def score(item: QuestionItem) -> int:
    """Character count of the question text plus every option text."""
    text_len = len(item.text or "")
    options_len = sum(len(value or "") for _, value in item.options)
    return text_len + options_len


def total_weight(items: Sequence[QuestionItem]) -> int:
    """Sum of item weights."""
    return sum(score(item) for item in items)


def average_weight(items: Sequence[QuestionItem]) -> float:
    """Mean item weight; 0.0 when there are no items."""
    if not items:
        return 0.0
    return total_weight(items) / len(items)
