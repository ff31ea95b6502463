"""
Tests for builder.output.renderer (ReportLab backend)
"""
import fitz
import pytest

from mcq_toolkit.builder.layout import Branding, compose_paper
from mcq_toolkit.builder.output.renderer import (
    Renderer,
    RenderError,
    ReportLabRenderer,
    SERIF_FONT,
    register_fonts,
    render_to_pdf,
)
from mcq_toolkit.core.models import QuestionItem


def _page_count(pdf_bytes: bytes) -> int:
    with fitz.open(stream=pdf_bytes, filetype="pdf") as doc:
        return doc.page_count


def test_render_when_sparse_paper_then_pdf_with_planned_pages(items_factory, metadata):
    """Ten short questions on two pages render to exactly two pages."""
    # Arrange
    doc = compose_paper(items_factory(10), metadata)

    # Act
    pdf = ReportLabRenderer().render(doc)

    # Assert
    assert pdf.startswith(b"%PDF")
    assert _page_count(pdf) == 2


def test_render_when_single_page_budget_then_no_hard_break(items_factory):
    doc = compose_paper(items_factory(4), target_page_count=1)

    pdf = ReportLabRenderer(show_footer=False).render(doc)

    assert _page_count(pdf) == 1


def test_render_when_inline_options_then_text_joined_with_separator(items_factory):
    doc = compose_paper(items_factory(45, text_len=10, option_len=1))

    pdf = ReportLabRenderer().render(doc)

    with fitz.open(stream=pdf, filetype="pdf") as rendered:
        text = rendered[0].get_text()
    assert "A) a | B) b" in text


def test_render_when_markup_characters_then_escaped_not_parsed():
    doc = compose_paper([QuestionItem(text="Is 3 < 4 & 5 > 2?", options=(("A", "yes"), ("B", "no")))])

    pdf = ReportLabRenderer().render(doc)

    with fitz.open(stream=pdf, filetype="pdf") as rendered:
        assert "Is 3 < 4 & 5 > 2?" in rendered[0].get_text()


def test_render_to_pdf_when_path_given_then_written(tmp_path, items_factory):
    doc = compose_paper(items_factory(3))
    out = tmp_path / "nested" / "paper.pdf"

    result = render_to_pdf(doc, out)

    assert result == out
    assert out.read_bytes().startswith(b"%PDF")


def test_render_to_pdf_when_renderer_fails_then_render_error_propagates(tmp_path, items_factory):
    class FailingRenderer:
        def render(self, document):
            raise RenderError("backend down")

    with pytest.raises(RenderError, match="backend down"):
        render_to_pdf(compose_paper(items_factory(1)), tmp_path / "x.pdf", FailingRenderer())
    assert not (tmp_path / "x.pdf").exists()


def test_reportlab_renderer_when_checked_then_satisfies_protocol():
    assert isinstance(ReportLabRenderer(), Renderer)


def test_register_fonts_when_called_twice_then_same_truetype_names():
    assert register_fonts() == register_fonts() == (SERIF_FONT, "DejaVuSerif-Bold")


def test_render_when_symbols_outside_math_then_embedded_truetype_text():
    """Characters outside Latin-1 print with the DejaVu font, not as missing glyphs."""
    # Arrange
    doc = compose_paper([
        QuestionItem(text="Is √2 ≤ π?", options=(("A", "x₁"), ("B", "no"))),
    ])

    # Act
    pdf = ReportLabRenderer().render(doc)

    # Assert
    with fitz.open(stream=pdf, filetype="pdf") as rendered:
        page = rendered[0]
        text = page.get_text()
        fonts = [font[3] for font in page.get_fonts()]
    assert "√2 ≤ π" in text
    assert any(SERIF_FONT in name for name in fonts)


def test_render_when_branding_has_logo_then_image_on_first_page(items_factory, sample_image):
    doc = compose_paper(items_factory(3), branding=Branding(logo_path=sample_image))

    pdf = ReportLabRenderer().render(doc)

    with fitz.open(stream=pdf, filetype="pdf") as rendered:
        assert len(rendered[0].get_images()) == 1
        assert "GOVT. DEGREE COLLEGE HINGORJA" in rendered[0].get_text()


def test_render_when_logo_missing_then_paper_rendered_without_image(tmp_path, items_factory):
    doc = compose_paper(items_factory(3), branding=Branding(logo_path=tmp_path / "missing.png"))

    pdf = ReportLabRenderer().render(doc)

    with fitz.open(stream=pdf, filetype="pdf") as rendered:
        assert rendered[0].get_images() == []
