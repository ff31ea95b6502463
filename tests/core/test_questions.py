"""
Unit Tests for QuestionItem Model

Tests for the immutable extracted question record.
"""

import pytest

from mcq_toolkit.core.models import QuestionItem


class TestQuestionItemCreation:
    """Tests for construction and normalization of options."""

    def test_question_item_when_options_unsorted_then_sorted_by_label(self):
        item = QuestionItem(text="Q", options=(("C", "c"), ("a", "A text"), ("B", "b")))

        assert item.labels == ("A", "B", "C")
        assert item.option_map["A"] == "A text"

    def test_question_item_when_duplicate_labels_then_first_wins(self):
        item = QuestionItem(text="Q", options=(("A", "first"), ("a", "second")))

        assert item.options == (("A", "first"),)

    def test_question_item_when_five_options_then_all_kept(self):
        """Labels A-E are supported."""
        item = QuestionItem(text="Q", options=tuple((l, l) for l in "EDCBA"))

        assert item.labels == ("A", "B", "C", "D", "E")

    def test_question_item_when_frozen_then_cannot_mutate(self):
        item = QuestionItem(text="Q")

        with pytest.raises(AttributeError):
            item.text = "changed"


class TestQuestionItemValidity:
    """Tests for present_options and is_valid."""

    def test_is_valid_when_text_and_two_options_then_true(self):
        assert QuestionItem(text="Q", options=(("A", "1"), ("B", "2"))).is_valid

    def test_is_valid_when_one_present_option_then_false(self):
        item = QuestionItem(text="Q", options=(("A", "1"), ("B", "  ")))

        assert item.present_options == (("A", "1"),)
        assert not item.is_valid

    def test_is_valid_when_blank_text_then_false(self):
        assert not QuestionItem(text=" ", options=(("A", "1"), ("B", "2"))).is_valid


class TestQuestionItemWireFormat:
    """Tests for to_dict/from_dict."""

    def test_from_dict_when_complete_then_all_fields(self):
        item = QuestionItem.from_dict({
            "question": "What is 2 + 2?",
            "options": {"A": "3", "B": "4"},
            "correct_answer": "B",
        })

        assert item.text == "What is 2 + 2?"
        assert item.option_map == {"A": "3", "B": "4"}
        assert item.correct_answer == "B"

    def test_from_dict_when_fields_missing_or_null_then_empty(self):
        item = QuestionItem.from_dict({"question": None, "options": None})

        assert item.text == ""
        assert item.options == ()
        assert item.correct_answer is None

    def test_from_dict_when_text_alias_then_used(self):
        assert QuestionItem.from_dict({"text": "Alias"}).text == "Alias"

    def test_from_dict_when_numeric_option_then_stringified(self):
        item = QuestionItem.from_dict({"question": "Q", "options": {"A": 3, "B": None}})

        assert item.option_map == {"A": "3", "B": ""}

    def test_to_dict_when_serialized_then_wire_keys(self):
        item = QuestionItem(text="Q", options=(("A", "1"),), correct_answer="A")

        assert item.to_dict() == {"question": "Q", "options": {"A": "1"}, "correct_answer": "A"}
