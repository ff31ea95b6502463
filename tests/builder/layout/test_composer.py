"""
Tests for builder.layout.composer

Test Coverage:
- assemble(): block order, numbering, break markers, header and footer
- compose_paper(): full layout pipeline
- strip_leading_numeral(): numbering never doubles
- Math spans: normalization, typesetting, verbatim fallback
"""
import pytest

from mcq_toolkit.builder.layout import (
    Branding,
    DensityLevel,
    FooterBlock,
    HeaderBlock,
    OptionArrangement,
    PageBreakMarker,
    QuestionBlock,
    assemble,
    classify,
    compose_paper,
    plan_breaks,
    strip_leading_numeral,
)
from mcq_toolkit.builder.math import MathRun, TextRun, plain_text
from mcq_toolkit.core.models import QuestionItem, TestMetadata


class TestAssemble:
    """Document structure."""

    def test_assemble_when_10_items_then_header_questions_break_footer(self, items_factory, metadata):
        """Scenario: header, Q1-Q5, break, Q6-Q10, footer."""
        # Arrange
        items = items_factory(10)
        tier = classify(10, 40.0, 2)
        plan = plan_breaks(10, 2)

        # Act
        doc = assemble(items, metadata, tier, plan)

        # Assert
        kinds = [type(b) for b in doc.blocks]
        assert kinds[0] is HeaderBlock
        assert kinds[-1] is FooterBlock
        assert kinds.count(PageBreakMarker) == 1
        break_pos = kinds.index(PageBreakMarker)
        assert doc.blocks[break_pos - 1].number == 5
        assert doc.blocks[break_pos + 1].number == 6
        assert [q.number for q in doc.questions] == list(range(1, 11))

    def test_assemble_when_metadata_given_then_header_verbatim(self, items_factory, metadata):
        """Metadata strings are printed as given."""
        doc = assemble(items_factory(2), metadata, classify(2, 10.0), plan_breaks(2))

        rows = dict(doc.header.metadata_rows)
        assert rows["Instructor:"] == "Dr. Sana"
        assert rows["Date:"] == "2024-03-01"
        assert rows["Class:"] == "XII"
        assert rows["Max Marks:"] == "40"
        assert rows["Min Marks:"] == "20"
        assert doc.header.subject_line == "Test Paper - Subject: Physics (XII)"

    def test_assemble_when_custom_branding_then_used(self, items_factory, metadata):
        branding = Branding(institution_name="CITY SCHOOL", end_message="END")

        doc = assemble(items_factory(1), metadata, classify(1, 10.0), plan_breaks(1), branding=branding)

        assert doc.header.institution_name == "CITY SCHOOL"
        assert doc.footer.message == "END"

    def test_assemble_when_no_items_then_header_and_footer_only(self, metadata):
        """An empty paper is still a valid document."""
        doc = assemble([], metadata, classify(0, 0.0), plan_breaks(0))

        assert len(doc.blocks) == 2
        assert doc.question_count == 0
        assert doc.page_break_count == 0


class TestComposePaper:
    """Full layout pipeline."""

    def test_compose_paper_when_45_short_items_then_compact_inline_one_break(self, items_factory):
        """Scenario: 45 short items on two pages."""
        doc = compose_paper(items_factory(45, text_len=15, option_len=1))

        assert doc.tier.density_level is DensityLevel.COMPACT
        assert doc.tier.option_arrangement is OptionArrangement.INLINE_FLOW
        assert doc.page_break_count == 1
        markers = [b for b in doc.blocks if isinstance(b, PageBreakMarker)]
        assert markers[0].after_number == 22

    def test_compose_paper_when_dicts_then_accepted(self):
        """Wire-format mappings are coerced."""
        doc = compose_paper([
            {"question": "What?", "options": {"A": "x", "B": "y"}},
            {"question": "Why?", "options": {"A": "p", "B": "q"}},
        ])

        assert doc.question_count == 2
        assert plain_text(doc.questions[1].runs) == "Why?"

    def test_compose_paper_when_default_metadata_then_documented_defaults(self, items_factory):
        doc = compose_paper(items_factory(1))

        rows = dict(doc.header.metadata_rows)
        assert rows["Instructor:"] == "Prof. Ahmed Khan"
        assert rows["Date:"] == ""
        assert "Mathematics" in doc.header.subject_line

    def test_compose_paper_when_page_budget_below_one_then_raises(self, items_factory):
        with pytest.raises(ValueError, match="target_page_count"):
            compose_paper(items_factory(3), target_page_count=0)

    def test_compose_paper_when_called_twice_then_equal_documents(self, items_factory, metadata):
        """Independent calls with equal inputs give equal output."""
        items = items_factory(12)

        assert compose_paper(items, metadata) == compose_paper(items, metadata)

    def test_compose_paper_when_rendered_then_input_items_unchanged(self):
        """Items are normalized into copies, never in place."""
        item = QuestionItem(text="Solve $x$", options=(("A", "$1$"), ("B", "2")))

        compose_paper([item])

        assert item.text == "Solve $x$"
        assert item.option_map["A"] == "$1$"


class TestQuestionContent:
    """Per-question degradation and numbering."""

    def test_compose_paper_when_text_has_leading_numeral_then_not_doubled(self):
        """Scenario: '5. What is 12 x 3?' prints as Q1 without the 5."""
        doc = compose_paper([
            QuestionItem(text="5. What is 12 x 3?", options=(("A", "36"), ("B", "30"))),
        ])

        question = doc.questions[0]
        assert question.number == 1
        assert plain_text(question.runs) == "What is 12 x 3?"

    def test_compose_paper_when_text_missing_then_blank_stem_other_items_intact(self):
        """Missing text degrades to an empty stem for that item only."""
        doc = compose_paper([
            {"options": {"A": "1", "B": "2"}},
            {"question": "Second", "options": {"A": "1", "B": "2"}},
        ])

        assert doc.questions[0].runs == ()
        assert plain_text(doc.questions[1].runs) == "Second"
        assert doc.questions[1].number == 2

    def test_compose_paper_when_option_blank_then_omitted(self):
        """Only present options are emitted, in label order."""
        doc = compose_paper([
            QuestionItem(text="Q", options=(("C", "c"), ("A", "a"), ("B", ""), ("E", "e"))),
        ])

        assert [o.label for o in doc.questions[0].options] == ["A", "C", "E"]

    def test_compose_paper_when_math_and_no_typesetter_then_canonical_deferred_runs(self):
        """Dollar delimiters are rewritten and left for the renderer."""
        doc = compose_paper([QuestionItem(text="Find $x^2$", options=(("A", "$$y$$"), ("B", "z")))])

        question = doc.questions[0]
        assert plain_text(question.runs) == "Find \\(x^2\\)"
        assert plain_text(question.options[0].runs) == "\\[y\\]"
        math = [r for r in question.runs if isinstance(r, MathRun)]
        assert math[0].rendered is None

    def test_compose_paper_when_one_span_fails_then_neighbours_still_typeset(self, stub_typesetter):
        """Scenario: a bad span falls back to its source text only."""
        # Arrange
        item = QuestionItem(
            text="Compute \\(a+b\\) and \\(BAD\\) then \\(c\\)",
            options=(("A", "1"), ("B", "2")),
        )

        # Act
        doc = compose_paper([item], typesetter=stub_typesetter)

        # Assert
        runs = doc.questions[0].runs
        rendered = [r for r in runs if isinstance(r, MathRun)]
        assert [r.latex for r in rendered] == ["a+b", "c"]
        assert all(r.rendered is not None for r in rendered)
        assert TextRun("\\(BAD\\)") in runs
        assert plain_text(runs) == "Compute \\(a+b\\) and \\(BAD\\) then \\(c\\)"


def test_compose_paper_when_numbered_math_question_first_then_q1_with_typeset_span(stub_typesetter):
    """Scenario: '5. What is \\( x^2 \\)?' becomes question 1 with x^2 typeset."""
    doc = compose_paper(
        [QuestionItem(text="5. What is \\( x^2 \\)?", options=(("A", "x"), ("B", "y")))],
        typesetter=stub_typesetter,
    )

    question = doc.questions[0]
    assert question.number == 1
    assert question.runs[0] == TextRun("What is ")
    assert question.runs[1].latex == "x^2"
    assert question.runs[1].rendered is not None
    assert question.runs[2] == TextRun("?")


def test_compose_paper_when_delimiter_unbalanced_then_literal_and_siblings_normal(stub_typesetter):
    """Scenario: an unclosed span stays literal text, the next item is typeset."""
    doc = compose_paper(
        [
            QuestionItem(text="Evaluate \\( \\frac{1}{2} now", options=(("A", "1"), ("B", "2"))),
            QuestionItem(text="Find $y$", options=(("A", "1"), ("B", "2"))),
        ],
        typesetter=stub_typesetter,
    )

    first, second = doc.questions
    assert first.runs == (TextRun("Evaluate \\( \\frac{1}{2} now"),)
    assert second.runs[1].rendered is not None


def test_strip_leading_numeral_when_inner_numbers_then_kept():
    """Only the leading number goes."""
    assert strip_leading_numeral("12) What is 3 + 4?") == "What is 3 + 4?"
    assert strip_leading_numeral("  7 Name the force") == "Name the force"
    assert strip_leading_numeral("What is 12 x 3?") == "What is 12 x 3?"
    assert strip_leading_numeral("") == ""


def test_assemble_when_branding_has_logo_then_header_carries_path(items_factory, metadata, tmp_path):
    logo = tmp_path / "logo.png"

    doc = assemble(items_factory(1), metadata, classify(1, 10.0), plan_breaks(1), branding=Branding(logo_path=logo))

    assert doc.header.logo_path == logo
