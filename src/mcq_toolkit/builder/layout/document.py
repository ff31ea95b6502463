"""
Module: builder.layout.document

Purpose:
    Structured markup tree for a rendered exam paper. Renderers walk
    the tree; nothing here knows about HTML or PDF.

Key Classes:
    - HeaderBlock: Branding, metadata table and student fields
    - QuestionBlock: One numbered question with its options
    - PageBreakMarker: Hard page boundary
    - FooterBlock: Closing message
    - ExamDocument: Ordered blocks plus the tier they were laid out with

Dependencies:
    - builder.layout.models: LayoutTier, PageBreakPlan
    - builder.math.formatter: TextRun, MathRun
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple, Union

from mcq_toolkit.builder.math.formatter import Run

from .models import LayoutTier, PageBreakPlan


@dataclass(frozen=True)
class HeaderBlock:
    """
    Paper header.

    Attributes:
        institution_name: Top line
        subject_line: e.g. "Test Paper - Subject: Mathematics (XI)"
        subject: Subject name (for emphasis by renderers)
        metadata_rows: (label, value) rows; empty value means blank field
        student_fields: Labels of fillable identity fields
        logo_path: Optional logo image, read by the renderer
    """

    institution_name: str
    subject_line: str
    subject: str
    metadata_rows: Tuple[Tuple[str, str], ...]
    student_fields: Tuple[str, ...]
    logo_path: Optional[Path] = None


@dataclass(frozen=True)
class OptionLine:
    """One labelled option."""

    label: str
    runs: Tuple[Run, ...]


@dataclass(frozen=True)
class QuestionBlock:
    """
    One numbered question.

    Attributes:
        number: 1-based question number
        runs: Question text runs (leading numeral already stripped)
        options: Present options in label order
    """

    number: int
    runs: Tuple[Run, ...]
    options: Tuple[OptionLine, ...]


@dataclass(frozen=True)
class PageBreakMarker:
    """Hard page break after the preceding question."""

    after_number: int


@dataclass(frozen=True)
class FooterBlock:
    """Closing message after the last question."""

    message: str


Block = Union[HeaderBlock, QuestionBlock, PageBreakMarker, FooterBlock]


@dataclass(frozen=True)
class ExamDocument:
    """
    A fully laid-out exam paper.

    Attributes:
        tier: Layout tier every block is styled with
        break_plan: Plan the page break markers came from
        blocks: Header, questions (with break markers), footer

    Example:
        >>> doc.question_count
        10
        >>> doc.page_break_count
        1
    """

    tier: LayoutTier
    break_plan: PageBreakPlan
    blocks: Tuple[Block, ...]

    @property
    def header(self) -> HeaderBlock:
        """The header block (always first)."""
        return self.blocks[0]

    @property
    def footer(self) -> FooterBlock:
        """The footer block (always last)."""
        return self.blocks[-1]

    @property
    def questions(self) -> Tuple[QuestionBlock, ...]:
        """Question blocks in order."""
        return tuple(b for b in self.blocks if isinstance(b, QuestionBlock))

    @property
    def question_count(self) -> int:
        """Number of question blocks."""
        return len(self.questions)

    @property
    def page_break_count(self) -> int:
        """Number of hard page breaks."""
        return sum(1 for b in self.blocks if isinstance(b, PageBreakMarker))
