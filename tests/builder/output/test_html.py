"""
Tests for builder.output.html

Test Coverage:
- Tier parameters reach the stylesheet
- Page break markers and option arrangement classes
- Escaping, blank fields, typeset vs deferred math
"""
from mcq_toolkit.builder.layout import Branding, compose_paper
from mcq_toolkit.builder.output.html import render_html
from mcq_toolkit.core.models import QuestionItem, TestMetadata


def test_render_html_when_sparse_paper_then_tier_css_and_one_break(items_factory, metadata):
    # Arrange
    doc = compose_paper(items_factory(10), metadata)

    # Act
    html = render_html(doc)

    # Assert
    assert 'class="density-sparse"' in html
    assert "font-size: 15.0pt" in html
    assert "line-height: 1.6" in html
    assert "grid-template-columns: 1fr 1fr" in html
    assert html.count('<div class="page-break"></div>') == 1
    assert "GOVT. DEGREE COLLEGE HINGORJA" in html
    assert "*** END OF PAPER *** BEST OF LUCK!" in html


def test_render_html_when_inline_tier_then_flex_options_with_separator(items_factory):
    doc = compose_paper(items_factory(45, text_len=10, option_len=1))

    html = render_html(doc)

    assert 'class="density-compact"' in html
    assert "flex-wrap: wrap" in html
    assert "content: ' | '" in html


def test_render_html_when_text_has_markup_then_escaped():
    doc = compose_paper([QuestionItem(text="Is 3 < 4 & 5 > 2?", options=(("A", "<b>yes</b>"), ("B", "no")))])

    html = render_html(doc)

    assert "Is 3 &lt; 4 &amp; 5 &gt; 2?" in html
    assert "&lt;b&gt;yes&lt;/b&gt;" in html


def test_render_html_when_date_blank_then_fillable_field(items_factory):
    doc = compose_paper(items_factory(1), TestMetadata())

    html = render_html(doc)

    assert 'class="blank-field"' in html


def test_render_html_when_math_deferred_then_katex_included():
    doc = compose_paper([QuestionItem(text="Find $x$", options=(("A", "1"), ("B", "2")))])

    html = render_html(doc)

    assert "katex.min.js" in html
    assert "Find \\(x\\)" in html


def test_render_html_when_math_typeset_then_image_and_no_katex(stub_typesetter):
    doc = compose_paper(
        [QuestionItem(text="Find $x$", options=(("A", "1"), ("B", "2")))],
        typesetter=stub_typesetter,
    )

    html = render_html(doc)

    assert 'src="data:image/png;base64,' in html
    assert 'class="math-inline"' in html
    assert "katex" not in html


def test_render_html_when_no_math_then_no_katex(items_factory):
    html = render_html(compose_paper(items_factory(3)))

    assert "katex" not in html


def test_render_html_when_branding_has_logo_then_embedded_png(items_factory, sample_image):
    doc = compose_paper(items_factory(1), branding=Branding(logo_path=str(sample_image)))

    html = render_html(doc)

    assert '<img class="header-logo" src="data:image/png;base64,' in html


def test_render_html_when_no_logo_then_no_logo_image(items_factory):
    html = render_html(compose_paper(items_factory(1)))

    assert 'class="header-logo"' not in html
