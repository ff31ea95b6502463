"""
Module: builder.layout

Purpose:
    Layout policy for exam papers. Converts an ordered question list
    into a density tier, a page break plan and a document tree.

Key Functions:
    - compose_paper(): Main entry point for layout
    - classify(): Pick the density tier
    - plan_breaks(): Partition items across pages
    - assemble(): Build the document tree

Key Classes:
    - LayoutTier: Chosen rendering parameters
    - PageBreakPlan: Break indices
    - ExamDocument: Document tree handed to renderers

Used By:
    - builder.controller: Main build controller
"""

from .models import Branding, DensityLevel, LayoutTier, OptionArrangement, PageBreakPlan
from .document import (
    ExamDocument,
    FooterBlock,
    HeaderBlock,
    OptionLine,
    PageBreakMarker,
    QuestionBlock,
)
from .metrics import average_weight, score, total_weight
from .classifier import classify
from .paginator import plan_breaks
from .composer import assemble, compose_paper, normalize_item, strip_leading_numeral

__all__ = [
    # Models
    "Branding",
    "DensityLevel",
    "LayoutTier",
    "OptionArrangement",
    "PageBreakPlan",
    # Document
    "ExamDocument",
    "FooterBlock",
    "HeaderBlock",
    "OptionLine",
    "PageBreakMarker",
    "QuestionBlock",
    # Functions
    "score",
    "total_weight",
    "average_weight",
    "classify",
    "plan_breaks",
    "assemble",
    "compose_paper",
    "normalize_item",
    "strip_leading_numeral",
]
