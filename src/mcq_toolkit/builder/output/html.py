"""
Module: builder.output.html

Purpose:
    Serialize an ExamDocument to a standalone, print-ready HTML page for
    HTML-to-PDF backends (headless browsers, remote rendering APIs).

Key Functions:
    - render_html(): Main serialization function

Notes:
    All CSS sizes come from the document's LayoutTier. Typeset math is
    embedded as PNG data URIs; deferred math keeps canonical delimiters
    and is picked up by KaTeX auto-render in the browser.
"""

from __future__ import annotations

import base64
from html import escape
from typing import Iterable, List

from mcq_toolkit.builder.layout.document import (
    ExamDocument,
    FooterBlock,
    HeaderBlock,
    PageBreakMarker,
    QuestionBlock,
)
from mcq_toolkit.builder.layout.models import DensityLevel, LayoutTier
from mcq_toolkit.builder.math.formatter import MathRun, Run, TextRun

from .assets import load_logo_png

KATEX_VERSION = "0.16.9"
KATEX_CDN = f"https://cdn.jsdelivr.net/npm/katex@{KATEX_VERSION}/dist"


def render_html(document: ExamDocument) -> str:
    """
    Serialize ``document`` to HTML.

    Args:
        document: Laid-out exam paper

    Returns:
        Complete HTML page as a string
    """
    deferred = _has_deferred_math(document)
    parts: List[str] = [
        "<!DOCTYPE html>",
        "<html>",
        "<head>",
        '<meta charset="UTF-8">',
        "<title>Test Paper</title>",
    ]
    if deferred:
        parts.append(f'<link rel="stylesheet" href="{KATEX_CDN}/katex.min.css">')
    parts.append(f"<style>{_build_css(document.tier)}</style>")
    parts.append("</head>")
    parts.append(f'<body class="density-{document.tier.density_level.slug}">')

    for block in document.blocks:
        if isinstance(block, HeaderBlock):
            parts.append(_header_html(block))
        elif isinstance(block, QuestionBlock):
            parts.append(_question_html(block, document.tier.font_size_pt))
        elif isinstance(block, PageBreakMarker):
            parts.append('<div class="page-break"></div>')
        elif isinstance(block, FooterBlock):
            parts.append(
                f'<div class="footer"><div class="end-message">{escape(block.message)}</div></div>'
            )

    if deferred:
        parts.append(_katex_scripts())
    parts.append("</body>")
    parts.append("</html>")
    return "\n".join(parts)


def _has_deferred_math(document: ExamDocument) -> bool:
    """True if any math span is left for the browser to typeset."""
    for question in document.questions:
        runs: List[Run] = list(question.runs)
        for option in question.options:
            runs.extend(option.runs)
        if any(isinstance(r, MathRun) and r.rendered is None for r in runs):
            return True
    return False


def _runs_html(runs: Iterable[Run], font_size_pt: float) -> str:
    """Inline HTML for a sequence of runs."""
    out: List[str] = []
    for run in runs:
        if isinstance(run, TextRun):
            out.append(escape(run.text))
        elif run.rendered is None:
            out.append(escape(run.canonical))
        else:
            width_pt, height_pt = run.rendered.size_pt(font_size_pt)
            data = base64.b64encode(run.rendered.png).decode("ascii")
            css_class = "math-display" if run.display else "math-inline"
            out.append(
                f'<img class="{css_class}" alt="{escape(run.latex)}" '
                f'style="width:{width_pt:.2f}pt;height:{height_pt:.2f}pt" '
                f'src="data:image/png;base64,{data}">'
            )
    return "".join(out)


def _header_html(header: HeaderBlock) -> str:
    rows = []
    for label, value in header.metadata_rows:
        cell = escape(value) if value else '<span class="blank-field"></span>'
        rows.append(
            f'<tr><td class="label">{escape(label)}</td><td class="value">{cell}</td></tr>'
        )
    fields = "".join(
        f'<span class="student-field-item">{escape(name)}: '
        f'<span class="student-underline"></span></span>'
        for name in header.student_fields
    )
    subject_line = escape(header.subject_line).replace(
        escape(header.subject),
        f'<span class="subject-underline">{escape(header.subject)}</span>',
        1,
    )
    logo_png = load_logo_png(header.logo_path)
    logo = ""
    if logo_png is not None:
        data = base64.b64encode(logo_png).decode("ascii")
        logo = f'<img class="header-logo" src="data:image/png;base64,{data}" alt="Logo">'
    return (
        '<div class="header">'
        f'<div class="main-title-area">{logo}<div class="header-text-container">'
        f'<div class="college-name">{escape(header.institution_name)}</div>'
        f'<div class="test-subject-line">{subject_line}</div>'
        "</div></div>"
        '<div class="metadata-table-wrapper"><table class="metadata-table">'
        f'{"".join(rows)}'
        "</table></div>"
        f'<div class="student-info-print-fields">{fields}</div>'
        "</div>"
    )


def _question_html(question: QuestionBlock, font_size_pt: float) -> str:
    options = "".join(
        f'<div class="option">{escape(option.label)}) '
        f"{_runs_html(option.runs, font_size_pt)}</div>"
        for option in question.options
    )
    return (
        '<div class="question">'
        f'<div class="question-text">{question.number}. '
        f"{_runs_html(question.runs, font_size_pt)}</div>"
        f'<div class="options">{options}</div>'
        "</div>"
    )


def _build_css(tier: LayoutTier) -> str:
    """Stylesheet with every size derived from the tier."""
    font = tier.font_size_pt
    spacing = tier.inter_item_spacing_pt
    indent = 15 if tier.density_level is DensityLevel.ULTRA_COMPACT else 20

    if tier.is_inline:
        options_css = "display: flex; flex-wrap: wrap; gap: 8pt;"
        option_css = "display: inline;"
        separator_css = ".option:not(:last-child)::after { content: ' | '; margin: 0 4pt; }"
    else:
        options_css = (
            "display: grid; grid-template-columns: 1fr 1fr; "
            "column-gap: 10pt; row-gap: 2pt;"
        )
        option_css = ""
        separator_css = ""

    return f"""
@page {{ size: A4; margin: 10mm 15mm; }}
* {{ margin: 0; padding: 0; box-sizing: border-box; }}
body {{
    font-family: 'Times New Roman', Times, serif;
    line-height: {tier.line_height_ratio};
    font-size: {font}pt;
    color: #000;
    background: white;
}}
.header {{ text-align: center; margin-bottom: {max(8, spacing)}pt; page-break-inside: avoid; }}
.main-title-area {{
    display: flex; align-items: center;
    border-bottom: 2px solid black; padding-bottom: 6pt; margin-bottom: 6pt;
}}
.header-logo {{
    width: 34pt; height: 34pt; border: 1px solid black; padding: 2px;
    margin-right: 9pt; object-fit: contain;
}}
.header-text-container {{ flex-grow: 1; text-align: left; }}
.college-name {{
    font-size: {min(20, font + 6)}pt; font-weight: 900;
    text-transform: uppercase; letter-spacing: 1.5px; line-height: 1.2;
}}
.test-subject-line {{ font-size: {max(10, font - 3)}pt; margin-top: 2pt; }}
.subject-underline {{ border-bottom: 1px solid black; font-weight: bold; padding: 0 4pt; }}
.metadata-table-wrapper {{ margin-top: {max(4, spacing - 2)}pt; border: 2px solid black; }}
.metadata-table {{ width: 100%; border-collapse: collapse; font-size: {max(9, font - 3)}pt; }}
.metadata-table tr {{ border-bottom: 1px solid black; }}
.metadata-table tr:last-child {{ border-bottom: none; }}
.metadata-table td {{ padding: 2pt 6pt; border-right: 1px solid black; text-align: left; }}
.metadata-table td:last-child {{ border-right: none; }}
.metadata-table .label {{ width: 25%; font-weight: bold; }}
.blank-field {{ border-bottom: 1px solid black; display: inline-block; min-height: 1em; width: 80%; }}
.student-info-print-fields {{
    margin-top: {max(4, spacing - 1)}pt; margin-bottom: {max(6, spacing)}pt;
    display: flex; justify-content: space-between;
    font-size: {max(10, font - 2)}pt; font-weight: bold;
}}
.student-field-item {{ flex: 1; }}
.student-underline {{ display: inline-block; border-bottom: 1px solid black; min-width: 100px; margin-left: 5px; }}
.question {{ margin-bottom: {spacing}pt; page-break-inside: avoid; }}
.question-text {{ margin-bottom: {max(2, spacing / 2)}pt; font-weight: 500; }}
.options {{ margin-left: {indent}pt; {options_css} }}
.option {{ {option_css} font-size: {max(9, font - 1)}pt; }}
{separator_css}
.math-inline {{ vertical-align: middle; }}
.math-display {{ display: block; margin: 2pt auto; }}
.page-break {{ page-break-after: always; }}
.footer {{ margin-top: {spacing * 2}pt; text-align: center; border-top: 2px solid black; padding-top: 8pt; page-break-inside: avoid; }}
.end-message {{ font-size: {max(12, font)}pt; font-weight: 900; text-transform: uppercase; letter-spacing: 1px; }}
@media print {{ body {{ -webkit-print-color-adjust: exact; print-color-adjust: exact; }} }}
"""


def _katex_scripts() -> str:
    """KaTeX + auto-render for spans left un-typeset."""
    return (
        f'<script src="{KATEX_CDN}/katex.min.js"></script>'
        f'<script src="{KATEX_CDN}/contrib/auto-render.min.js"></script>'
        "<script>renderMathInElement(document.body, {delimiters: ["
        "{left: '\\\\[', right: '\\\\]', display: true},"
        "{left: '\\\\(', right: '\\\\)', display: false}"
        "], throwOnError: false});</script>"
    )
