"""
test_question_order.py
----------------------
Unit tests for question ordering and text overrides.
"""
import pytest

from cyclejournal.questions.actions import (
    DEFAULT_QUESTION_ORDER,
    InvalidQuestionMove,
    InvalidQuestionText,
    QuestionNotFound,
    clean_question_text,
    ensure_question_id,
    move_question,
    ordered_questions,
    resolve_question_order,
)


class TestResolveQuestionOrder:
    """Test resolve_question_order invariants."""

    def test_no_custom_order(self):
        assert resolve_question_order(None) == list(range(1, 31))
        assert resolve_question_order([]) == DEFAULT_QUESTION_ORDER

    def test_valid_permutation_is_kept(self):
        order = list(range(30, 0, -1))
        assert resolve_question_order(order) == order

    def test_partial_order_is_filled_with_lowest_missing_ids(self):
        resolved = resolve_question_order([5, 3])
        assert resolved[:4] == [5, 3, 1, 2]
        assert resolved[4] == 4
        assert sorted(resolved) == list(range(1, 31))

    def test_duplicates_and_out_of_range_are_dropped(self):
        resolved = resolve_question_order([2, 2, 0, 31, -4, 7])
        assert resolved[:3] == [2, 7, 1]
        assert len(resolved) == 30
        assert len(set(resolved)) == 30

    def test_non_integer_ids_are_dropped(self):
        resolved = resolve_question_order(["3", 4.0, True, None, 6])
        assert resolved[0] == 6
        assert sorted(resolved) == list(range(1, 31))

    def test_does_not_modify_input(self):
        order = [3, 1]
        resolve_question_order(order)
        assert order == [3, 1]


class TestMoveQuestion:
    """Test moving a question to another position."""

    def test_move_forward(self):
        moved = move_question(None, 0, 2)
        assert moved[:4] == [2, 3, 1, 4]

    def test_move_backward(self):
        moved = move_question(None, 29, 0)
        assert moved[:2] == [30, 1]
        assert moved[-1] == 29

    def test_destination_is_clamped(self):
        moved = move_question(None, 0, 100)
        assert moved[-1] == 1
        assert len(moved) == 30

    @pytest.mark.parametrize("source", [-1, 30, 99])
    def test_invalid_source(self, source):
        with pytest.raises(InvalidQuestionMove):
            move_question(None, source, 0)


class TestOrderedQuestions:
    """Test materialization of the question list."""

    def test_default_order(self, catalog):
        questions = ordered_questions(catalog)
        assert [question.id for question in questions] == list(range(1, 31))

    def test_custom_order_and_overrides(self, catalog):
        questions = ordered_questions(catalog, [3, 1, 2], {1: "Edited question"})
        assert [question.id for question in questions[:3]] == [3, 1, 2]
        assert questions[1].text == "Edited question"
        assert questions[0].text == catalog[2].text

    def test_override_does_not_touch_catalog(self, catalog):
        original_text = catalog[0].text
        ordered_questions(catalog, None, {1: "Edited question"})
        assert catalog[0].text == original_text

    def test_empty_catalog(self):
        assert ordered_questions([], [1, 2, 3]) == []


class TestQuestionValidation:
    def test_question_id_in_range(self):
        assert ensure_question_id(30) == 30

    @pytest.mark.parametrize("question_id", [0, 31])
    def test_question_id_out_of_range(self, question_id):
        with pytest.raises(QuestionNotFound):
            ensure_question_id(question_id)

    def test_question_text_is_stripped(self):
        assert clean_question_text("  What went well?  ") == "What went well?"

    def test_blank_question_text(self):
        with pytest.raises(InvalidQuestionText):
            clean_question_text("   ")
