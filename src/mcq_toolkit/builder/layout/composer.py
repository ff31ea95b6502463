"""
Module: builder.layout.composer

Purpose:
    Assemble the exam document from ordered questions, a density tier
    and a page break plan. Also hosts compose_paper(), the pure layout
    pipeline used by every build.

Key Functions:
    - assemble(): Emit header, numbered questions, breaks and footer
    - compose_paper(): normalize → score → classify → plan → assemble
    - strip_leading_numeral(): Remove a source question number prefix
    - normalize_item(): Canonicalize math delimiters in an item

Dependencies:
    - builder.layout: classifier, paginator, metrics, document
    - builder.math: normalize, typeset_text

Used By:
    - builder.controller: build_paper()
"""

from __future__ import annotations

import logging
import re
from typing import Any, List, Mapping, Optional, Sequence

from mcq_toolkit.common.thresholds import DensityThresholds
from mcq_toolkit.core.models import QuestionItem, TestMetadata
from mcq_toolkit.builder.math import Typesetter, normalize, typeset_text

from .classifier import classify
from .document import (
    Block,
    ExamDocument,
    FooterBlock,
    HeaderBlock,
    OptionLine,
    PageBreakMarker,
    QuestionBlock,
)
from .metrics import average_weight
from .models import Branding, LayoutTier, PageBreakPlan
from .paginator import plan_breaks

logger = logging.getLogger(__name__)

# Leading question number: digits, optional punctuation, whitespace
_LEADING_NUMERAL = re.compile(r"^\s*\d+[.):\-]?\s*")


def strip_leading_numeral(text: str) -> str:
    """
    Remove a leading question number so renumbering never doubles it.

    Only a leading run of digits with optional punctuation and trailing
    whitespace is removed; numerals later in the text are untouched.

    Example:
        >>> strip_leading_numeral("5. What is 12 x 3?")
        'What is 12 x 3?'
    """
    return _LEADING_NUMERAL.sub("", text or "", count=1)


def normalize_item(item: QuestionItem) -> QuestionItem:
    """Return ``item`` with canonical math delimiters in every text field."""
    return item.with_text(
        normalize(item.text),
        {label: normalize(value) for label, value in item.options},
    )


def assemble(
    items: Sequence[QuestionItem],
    metadata: TestMetadata,
    tier: LayoutTier,
    break_plan: PageBreakPlan,
    *,
    typesetter: Optional[Typesetter] = None,
    branding: Optional[Branding] = None,
) -> ExamDocument:
    """
    Build the document tree for an ordered list of questions.

    Question numbers are ``index + 1`` in input order. A page break
    marker follows every item whose index is in ``break_plan``.

    Args:
        items: Questions in display order
        metadata: Header fields, printed verbatim
        tier: Density tier, carried on the document for renderers
        break_plan: Page break indices
        typesetter: Math engine (None defers typesetting to the renderer)
        branding: Institution wording (defaults to Branding())

    Returns:
        ExamDocument (header first, footer last)
    """
    branding = branding or Branding()
    blocks: List[Block] = [_build_header(metadata, branding)]

    for index, item in enumerate(items):
        blocks.append(_build_question(index + 1, item, typesetter))
        if break_plan.breaks_after(index):
            blocks.append(PageBreakMarker(after_number=index + 1))

    blocks.append(FooterBlock(message=branding.end_message))

    logger.debug(
        f"Assembled {len(items)} questions with "
        f"{len(break_plan.break_after_indices)} page breaks"
    )
    return ExamDocument(tier=tier, break_plan=break_plan, blocks=tuple(blocks))


def compose_paper(
    items: Sequence[Any],
    metadata: Optional[TestMetadata] = None,
    *,
    target_page_count: int = 2,
    thresholds: Optional[DensityThresholds] = None,
    typesetter: Optional[Typesetter] = None,
    branding: Optional[Branding] = None,
) -> ExamDocument:
    """
    Run the full layout policy for one paper.

    Pipeline:
    1. Normalize math delimiters in every text field
    2. Score items and classify density
    3. Plan page breaks
    4. Assemble the document

    Args:
        items: QuestionItems (mappings in wire format are accepted too)
        metadata: Header fields (defaults applied when None)
        target_page_count: Page budget (>= 1)
        thresholds: Density boundaries and tier styles
        typesetter: Math engine, None to defer typesetting
        branding: Institution wording

    Returns:
        ExamDocument

    Raises:
        ValueError: If target_page_count < 1 (checked before any layout)

    Example:
        >>> doc = compose_paper(items, TestMetadata(subject="Physics"))
        >>> doc.tier.density_level.slug
        'sparse'
    """
    if target_page_count < 1:
        raise ValueError(f"target_page_count must be >= 1: {target_page_count}")

    metadata = metadata or TestMetadata()
    normalized = [normalize_item(_coerce_item(item)) for item in items]

    tier = classify(
        len(normalized),
        average_weight(normalized),
        target_page_count,
        thresholds,
    )
    break_plan = plan_breaks(len(normalized), target_page_count)

    logger.info(
        f"Laying out {len(normalized)} questions: {tier.density_level.slug} density, "
        f"{tier.option_arrangement.value} options, {break_plan.page_count} page(s)"
    )

    return assemble(
        normalized,
        metadata,
        tier,
        break_plan,
        typesetter=typesetter,
        branding=branding,
    )


def _coerce_item(item: Any) -> QuestionItem:
    """Accept QuestionItems or wire dicts; anything else becomes an empty item."""
    if isinstance(item, QuestionItem):
        return item
    if isinstance(item, Mapping):
        return QuestionItem.from_dict(item)
    logger.warning(f"Rendering unrecognized item {type(item).__name__} as blank question")
    return QuestionItem()


def _build_header(metadata: TestMetadata, branding: Branding) -> HeaderBlock:
    """Header with metadata passed through verbatim."""
    rows = (
        ("Date:", metadata.date),
        ("Time:", metadata.time),
        ("Instructor:", metadata.instructor),
        ("Max Marks:", metadata.max_marks),
        ("Min Marks:", metadata.min_marks),
        ("Class:", metadata.class_name),
    )
    return HeaderBlock(
        institution_name=branding.institution_name,
        subject_line=(
            f"{branding.paper_title} - Subject: {metadata.subject} ({metadata.class_name})"
        ),
        subject=metadata.subject,
        metadata_rows=rows,
        student_fields=branding.student_fields,
        logo_path=branding.logo_path,
    )


def _build_question(
    number: int,
    item: QuestionItem,
    typesetter: Optional[Typesetter],
) -> QuestionBlock:
    """Numbered question block; missing fields degrade to empty text."""
    if not item.text:
        logger.debug(f"Question {number} has no text, rendering blank stem")

    runs = typeset_text(strip_leading_numeral(item.text), typesetter)
    options = tuple(
        OptionLine(label=label, runs=typeset_text(value, typesetter))
        for label, value in item.present_options
    )
    return QuestionBlock(number=number, runs=runs, options=options)
