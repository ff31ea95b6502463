"""
Module: builder.output.renderer

Purpose:
    Render an ExamDocument to PDF. The build controller only depends on
    the Renderer protocol; ReportLabRenderer is the local backend and
    RemoteHtmlRenderer (output.remote) the HTML-API backend.

Key Functions:
    - render_to_pdf(): Render a document and write it to disk
    - register_fonts(): Register the TrueType body fonts

Key Classes:
    - Renderer: Protocol for rendering backends
    - RenderError: Failure signal from any backend
    - ReportLabRenderer: A4 PDF via ReportLab platypus

Dependencies:
    - reportlab: PDF generation
    - builder.layout.document: ExamDocument blocks

Used By:
    - builder.controller: Pipeline orchestration
"""

from __future__ import annotations

import base64
import io
import logging
from pathlib import Path
from typing import Iterable, List, Optional, Protocol, Tuple, runtime_checkable
from xml.sax.saxutils import escape

import matplotlib
from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle
from reportlab.lib.units import mm
from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont
from reportlab.platypus import (
    Flowable,
    HRFlowable,
    Image,
    KeepTogether,
    PageBreak,
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)
from reportlab.platypus.doctemplate import LayoutError

from mcq_toolkit.builder.layout.document import (
    ExamDocument,
    FooterBlock,
    HeaderBlock,
    PageBreakMarker,
    QuestionBlock,
)
from mcq_toolkit.builder.layout.models import LayoutTier
from mcq_toolkit.builder.math.formatter import Run, TextRun

from .assets import load_logo_png

logger = logging.getLogger(__name__)

# Page geometry (matches the @page rule of the HTML backend)
MARGIN_TOP_PT = 10 * mm
MARGIN_BOTTOM_PT = 12 * mm
MARGIN_SIDE_PT = 15 * mm

# Footer configuration
FOOTER_FONT_SIZE = 7
BLANK_FIELD = "_" * 24

# Body fonts (TrueType, bundled with matplotlib)
SERIF_FONT = "DejaVuSerif"
SERIF_BOLD_FONT = "DejaVuSerif-Bold"
FALLBACK_FONTS = ("Times-Roman", "Times-Bold")

LOGO_SIZE_PT = 12 * mm


class RenderError(Exception):
    """A rendering backend failed to produce a document."""
    pass


@runtime_checkable
class Renderer(Protocol):
    """Turns an ExamDocument into PDF bytes, raising RenderError on failure."""

    def render(self, document: ExamDocument) -> bytes:
        ...


def register_fonts() -> Tuple[str, str]:
    """
    Register the DejaVu Serif TrueType fonts with ReportLab.

    Safe to call repeatedly. If the font files cannot be loaded the
    built-in Times fonts are used and a warning is logged.

    Returns:
        (regular, bold) font names to use in paragraph styles
    """
    if SERIF_FONT in pdfmetrics.getRegisteredFontNames():
        return SERIF_FONT, SERIF_BOLD_FONT

    font_dir = Path(matplotlib.get_data_path()) / "fonts" / "ttf"
    try:
        pdfmetrics.registerFont(TTFont(SERIF_FONT, str(font_dir / "DejaVuSerif.ttf")))
        pdfmetrics.registerFont(TTFont(SERIF_BOLD_FONT, str(font_dir / "DejaVuSerif-Bold.ttf")))
    except (TTFError, OSError) as e:
        logger.warning(f"DejaVu Serif unavailable, using Times: {e}")
        return FALLBACK_FONTS

    # <b> markup inside paragraphs resolves through the family
    pdfmetrics.registerFontFamily(
        SERIF_FONT,
        normal=SERIF_FONT,
        bold=SERIF_BOLD_FONT,
        italic=SERIF_FONT,
        boldItalic=SERIF_BOLD_FONT,
    )
    logger.debug(f"Registered {SERIF_FONT} from {font_dir}")
    return SERIF_FONT, SERIF_BOLD_FONT


def render_to_pdf(
    document: ExamDocument,
    output_path: Path,
    renderer: Optional[Renderer] = None,
) -> Path:
    """
    Render ``document`` and write the PDF to ``output_path``.

    Args:
        document: Laid-out exam paper
        output_path: Path to write PDF
        renderer: Backend (defaults to ReportLabRenderer)

    Returns:
        output_path

    Raises:
        RenderError: If the backend fails
        OSError: If the PDF cannot be written

    Example:
        >>> render_to_pdf(document, Path("output/final_test_10.pdf"))
    """
    renderer = renderer or ReportLabRenderer()
    pdf_bytes = renderer.render(document)

    output_path = Path(output_path)
    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_bytes(pdf_bytes)

    logger.info(f"Rendered {document.question_count} questions to {output_path}")
    return output_path


class ReportLabRenderer:
    """
    Local A4 renderer built on ReportLab platypus.

    Each question is kept together on one page, page break markers
    become hard breaks, and typeset math is placed as inline images.
    """

    def __init__(self, *, show_footer: bool = True) -> None:
        self.show_footer = show_footer

    def render(self, document: ExamDocument) -> bytes:
        """
        Render ``document`` to PDF bytes.

        Raises:
            RenderError: If ReportLab cannot lay out or encode the document
        """
        buf = io.BytesIO()
        template = SimpleDocTemplate(
            buf,
            pagesize=A4,
            topMargin=MARGIN_TOP_PT,
            bottomMargin=MARGIN_BOTTOM_PT,
            leftMargin=MARGIN_SIDE_PT,
            rightMargin=MARGIN_SIDE_PT,
            title="Test Paper",
        )
        styles = _Styles(document.tier, register_fonts())
        story = self._build_story(document, styles, template.width)

        on_page = _draw_footer if self.show_footer else _no_footer
        try:
            template.build(story, onFirstPage=on_page, onLaterPages=on_page)
        except (LayoutError, ValueError, OSError) as e:
            raise RenderError(f"ReportLab rendering failed: {e}") from e

        logger.debug(f"ReportLab produced {len(buf.getvalue())} bytes")
        return buf.getvalue()

    def _build_story(
        self,
        document: ExamDocument,
        styles: _Styles,
        frame_width: float,
    ) -> List[Flowable]:
        story: List[Flowable] = []
        for block in document.blocks:
            if isinstance(block, HeaderBlock):
                story.extend(_header_flowables(block, styles, frame_width))
            elif isinstance(block, QuestionBlock):
                story.append(_question_flowable(block, styles, frame_width))
            elif isinstance(block, PageBreakMarker):
                story.append(PageBreak())
            elif isinstance(block, FooterBlock):
                story.append(Spacer(1, styles.tier.inter_item_spacing_pt * 2))
                story.append(HRFlowable(width="100%", thickness=2, color=colors.black))
                story.append(Paragraph(escape(block.message), styles.end_message))
        return story


class _Styles:
    """Paragraph styles derived from a layout tier."""

    def __init__(self, tier: LayoutTier, fonts: Tuple[str, str] = FALLBACK_FONTS) -> None:
        font = tier.font_size_pt
        regular, bold = fonts
        self.tier = tier
        self.institution = ParagraphStyle(
            "institution",
            fontName=bold,
            fontSize=min(20, font + 6),
            leading=min(20, font + 6) * 1.2,
        )
        self.subject_line = ParagraphStyle(
            "subject_line",
            fontName=regular,
            fontSize=max(10, font - 3),
            leading=max(10, font - 3) * 1.3,
            spaceAfter=6,
        )
        self.table = ParagraphStyle(
            "table",
            fontName=regular,
            fontSize=max(9, font - 3),
            leading=max(9, font - 3) * 1.2,
        )
        self.student = ParagraphStyle(
            "student",
            fontName=bold,
            fontSize=max(10, font - 2),
            leading=max(10, font - 2) * 1.2,
        )
        self.question = ParagraphStyle(
            "question",
            fontName=regular,
            fontSize=font,
            leading=tier.leading_pt,
            spaceAfter=max(2, tier.inter_item_spacing_pt / 2),
        )
        option_size = max(9, font - 1)
        self.option = ParagraphStyle(
            "option",
            fontName=regular,
            fontSize=option_size,
            leading=option_size * tier.line_height_ratio,
        )
        self.end_message = ParagraphStyle(
            "end_message",
            fontName=bold,
            fontSize=max(12, font),
            leading=max(12, font) * 1.3,
            alignment=TA_CENTER,
            spaceBefore=8,
        )


def _runs_markup(runs: Iterable[Run], font_size_pt: float) -> str:
    """ReportLab paragraph markup for text and math runs."""
    out: List[str] = []
    for run in runs:
        if isinstance(run, TextRun):
            out.append(escape(run.text))
        elif run.rendered is None:
            out.append(escape(run.canonical))
        else:
            width_pt, height_pt = run.rendered.size_pt(font_size_pt)
            data = base64.b64encode(run.rendered.png).decode("ascii")
            out.append(
                f'<img src="data:image/png;base64,{data}" '
                f'width="{width_pt:.2f}" height="{height_pt:.2f}" valign="middle"/>'
            )
    return "".join(out)


def _header_flowables(
    header: HeaderBlock,
    styles: _Styles,
    frame_width: float,
) -> List[Flowable]:
    subject_markup = escape(header.subject_line).replace(
        escape(header.subject), f"<u><b>{escape(header.subject)}</b></u>", 1
    )
    rows = [
        [
            Paragraph(f"<b>{escape(label)}</b>", styles.table),
            Paragraph(escape(value) if value else BLANK_FIELD, styles.table),
        ]
        for label, value in header.metadata_rows
    ]
    metadata_table = Table(rows, colWidths=[frame_width * 0.25, frame_width * 0.75])
    metadata_table.setStyle(TableStyle([
        ("BOX", (0, 0), (-1, -1), 2, colors.black),
        ("INNERGRID", (0, 0), (-1, -1), 1, colors.black),
        ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
        ("TOPPADDING", (0, 0), (-1, -1), 2),
        ("BOTTOMPADDING", (0, 0), (-1, -1), 2),
    ]))

    fields = [
        Paragraph(f"{escape(name)}: {BLANK_FIELD}", styles.student)
        for name in header.student_fields
    ]
    if fields:
        student_table = Table([fields], colWidths=[frame_width / len(fields)] * len(fields))
    else:
        student_table = Spacer(1, 0)

    title: List[Flowable] = [
        Paragraph(escape(header.institution_name), styles.institution),
        Paragraph(subject_markup, styles.subject_line),
    ]
    logo_png = load_logo_png(header.logo_path)
    if logo_png is not None:
        logo = Image(
            io.BytesIO(logo_png),
            width=LOGO_SIZE_PT,
            height=LOGO_SIZE_PT,
            kind="proportional",
        )
        logo_column = LOGO_SIZE_PT + 9
        title_area = Table(
            [[logo, title]],
            colWidths=[logo_column, frame_width - logo_column],
            hAlign="LEFT",
        )
        title_area.setStyle(TableStyle([
            ("VALIGN", (0, 0), (-1, -1), "MIDDLE"),
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("TOPPADDING", (0, 0), (-1, -1), 0),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 0),
        ]))
        title = [title_area]

    spacing = max(6, styles.tier.inter_item_spacing_pt)
    return [
        *title,
        HRFlowable(width="100%", thickness=2, color=colors.black, spaceAfter=4),
        metadata_table,
        Spacer(1, max(4, styles.tier.inter_item_spacing_pt - 1)),
        student_table,
        Spacer(1, spacing),
    ]


def _question_flowable(
    question: QuestionBlock,
    styles: _Styles,
    frame_width: float,
) -> Flowable:
    """Question stem and options, kept together on one page."""
    tier = styles.tier
    parts: List[Flowable] = [
        Paragraph(
            f"{question.number}. {_runs_markup(question.runs, tier.font_size_pt)}",
            styles.question,
        )
    ]

    option_markup = [
        f"{escape(option.label)}) {_runs_markup(option.runs, styles.option.fontSize)}"
        for option in question.options
    ]
    if option_markup and tier.is_inline:
        parts.append(Paragraph(" | ".join(option_markup), styles.option))
    elif option_markup:
        # Two-column grid, filled row by row (A B / C D / E)
        cells = [Paragraph(markup, styles.option) for markup in option_markup]
        rows = [cells[i:i + 2] for i in range(0, len(cells), 2)]
        if len(rows[-1]) == 1:
            rows[-1].append("")
        indent = 20
        column = (frame_width - indent) / 2
        grid = Table(rows, colWidths=[column, column], hAlign="RIGHT")
        grid.setStyle(TableStyle([
            ("LEFTPADDING", (0, 0), (-1, -1), 0),
            ("TOPPADDING", (0, 0), (-1, -1), 1),
            ("BOTTOMPADDING", (0, 0), (-1, -1), 1),
            ("VALIGN", (0, 0), (-1, -1), "TOP"),
        ]))
        parts.append(grid)

    parts.append(Spacer(1, tier.inter_item_spacing_pt))
    return KeepTogether(parts)


def _draw_footer(c, doc) -> None:
    """
    Draw a centered page footer.

    Positioned in the bottom margin, 7pt grey Helvetica.
    """
    from mcq_toolkit import __version__

    text = f"Page {doc.page} | Generated with MCQ Paper Toolkit v{__version__}"
    page_width, _ = A4
    c.saveState()
    c.setFont("Helvetica", FOOTER_FONT_SIZE)
    c.setFillColorRGB(0.4, 0.4, 0.4)
    text_width = c.stringWidth(text, "Helvetica", FOOTER_FONT_SIZE)
    c.drawString((page_width - text_width) / 2, 15, text)
    c.restoreState()


def _no_footer(c, doc) -> None:
    pass
