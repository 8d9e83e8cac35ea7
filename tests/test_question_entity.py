# tests/test_question_entity.py
import pytest
from pydantic import ValidationError

from app.domain.entities.question import DEFAULT_AVG_RATING, Question, QuestionDraft, rolling_average


def _question(ratings, avg_rating):
    return Question(id="q", text="Q?", options=["A", "B"], correct_option_index=0,
                    ratings=ratings, avg_rating=avg_rating)


@pytest.mark.parametrize("ratings, expected", [
    ([], DEFAULT_AVG_RATING),
    ([5, 5, 4], 4.7),
    ([5, 5, 4, 2], 4.0),
    ([2, 2, 2], 2.0),
    ([4, 5, 4, 4], 4.3),  # 4.25 rounds half-up
    ([1, 2], 1.5),
])
def test_rolling_average(ratings, expected):
    assert rolling_average(ratings) == expected


def test_unrated_question_is_visible_with_optimistic_prior():
    question = Question(id="q", text="Q?", options=["A", "B"], correct_option_index=1)
    assert question.avg_rating == 5
    assert question.ratings == []
    assert not question.is_hidden


def test_low_average_needs_three_ratings_to_hide():
    assert not _question([1, 1], 1.0).is_hidden
    assert _question([2, 2, 2], 2.0).is_hidden
    assert _question([3, 3, 3], 3.0).is_hidden
    assert not _question([5, 5, 4, 2], 4.0).is_hidden


def test_is_correct():
    question = Question(id="q", text="Q?", options=["A", "B", "C", "D"], correct_option_index=2)
    assert question.is_correct(2)
    assert not question.is_correct(1)


def test_draft_strips_text():
    draft = QuestionDraft(text="  What?  ", options=["a", "b"], correct_option_index=0)
    assert draft.text == "What?"


@pytest.mark.parametrize("text, options, index", [
    ("Q?", ["only"], 0),
    ("Q?", [], 0),
    ("Q?", ["a", "b"], 2),
    ("Q?", ["a", "b"], -1),
    ("   ", ["a", "b"], 0),
])
def test_draft_rejects_malformed_questions(text, options, index):
    with pytest.raises(ValidationError):
        QuestionDraft(text=text, options=options, correct_option_index=index)
