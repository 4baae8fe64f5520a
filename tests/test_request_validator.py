"""
Tests for generation request validation.
"""

import pytest
from hypothesis import given, strategies as st

from conftest import make_lesson
from mandarin_lesson_generator.models import (
    CardType, FlashcardOptions, FlashcardRequest, QuestionType, QuizOptions, QuizRequest,
    VocabularyEntry,
)
from mandarin_lesson_generator.validation import RequestValidator


@pytest.fixture
def validator():
    return RequestValidator()


def flashcard_request(lesson, **kwargs):
    kwargs.setdefault("card_types", [CardType.HANZI_TO_PINYIN])
    return FlashcardRequest(lesson=lesson, options=FlashcardOptions(**kwargs))


def quiz_request(lesson, **kwargs):
    kwargs.setdefault("question_types", [QuestionType.CHINESE_TO_PINYIN])
    return QuizRequest(lesson=lesson, options=QuizOptions(**kwargs))


class TestFlashcardRequests:

    def test_valid_request(self, validator, greeting_lesson):
        result = validator.validate(flashcard_request(greeting_lesson, max_cards=10))

        assert result.is_valid
        assert result.errors == []

    def test_max_cards_out_of_range(self, validator, greeting_lesson):
        """maxCards=100 gives exactly one error naming the valid range."""
        result = validator.validate(flashcard_request(greeting_lesson, max_cards=100))

        assert not result.is_valid
        assert len(result.errors) == 1
        assert "1 and 50" in result.errors[0]

    @pytest.mark.parametrize("max_cards", [0, 51, 2.5, True, None])
    def test_non_integer_or_out_of_range_max_cards(self, validator, greeting_lesson, max_cards):
        result = validator.validate(flashcard_request(greeting_lesson, max_cards=max_cards))

        assert not result.is_valid

    def test_unknown_card_type(self, validator, greeting_lesson):
        result = validator.validate(flashcard_request(greeting_lesson, card_types=["poem"]))

        assert result.errors == ["Invalid card types: poem"]

    def test_no_card_types(self, validator, greeting_lesson):
        result = validator.validate(flashcard_request(greeting_lesson, card_types=[]))

        assert result.errors == ["At least one card type is required"]

    def test_unknown_difficulty(self, validator, greeting_lesson):
        result = validator.validate(flashcard_request(greeting_lesson, difficulty_filter=["expert"]))

        assert result.errors == ["Invalid difficulty levels: expert"]

    def test_missing_lesson(self, validator):
        result = validator.validate(flashcard_request(None))

        assert result.errors == ["Lesson is required"]

    def test_lesson_without_vocabulary(self, validator):
        result = validator.validate(flashcard_request(make_lesson([])))

        assert result.errors == ["Lesson must contain vocabulary entries"]

    def test_every_violation_is_reported(self, validator):
        result = validator.validate(flashcard_request(None, max_cards=0, card_types=[]))

        assert len(result.errors) == 3


class TestQuizRequests:

    def test_valid_request(self, validator, greeting_lesson):
        assert validator.validate(quiz_request(greeting_lesson, time_limit=300)).is_valid

    @pytest.mark.parametrize("count", [2, 21])
    def test_question_count_bounds(self, validator, greeting_lesson, count):
        result = validator.validate(quiz_request(greeting_lesson, question_count=count))

        assert "3 and 20" in result.errors[0]

    @pytest.mark.parametrize("time_limit", [29, 1801])
    def test_time_limit_bounds(self, validator, greeting_lesson, time_limit):
        result = validator.validate(quiz_request(greeting_lesson, time_limit=time_limit))

        assert result.errors == [
            f"timeLimit must be between 30 and 1800 seconds (received: {time_limit})"
        ]

    def test_unknown_question_type(self, validator, greeting_lesson):
        result = validator.validate(quiz_request(greeting_lesson, question_types=["essay"]))

        assert result.errors == ["Invalid question types: essay"]

    def test_missing_options(self, validator, greeting_lesson):
        result = validator.validate(QuizRequest(lesson=greeting_lesson, options=None))

        assert result.errors == ["Quiz options are required"]


class TestValidatorProperties:
    """Property-based tests for request validation."""

    @pytest.mark.property
    @given(st.integers(min_value=-100, max_value=200))
    def test_max_cards_bounds(self, max_cards):
        """A flashcard request is valid exactly when maxCards is in 1-50."""
        lesson = make_lesson([VocabularyEntry("你好", "hello")])
        result = RequestValidator().validate(flashcard_request(lesson, max_cards=max_cards))

        assert result.is_valid == (1 <= max_cards <= 50)

    @pytest.mark.property
    @given(st.integers(min_value=-10, max_value=40), st.one_of(st.none(), st.integers(0, 3000)))
    def test_quiz_bounds(self, count, time_limit):
        lesson = make_lesson([VocabularyEntry("你好", "hello")])
        result = RequestValidator().validate(quiz_request(lesson, question_count=count, time_limit=time_limit))

        expected = 3 <= count <= 20 and (time_limit is None or 30 <= time_limit <= 1800)
        assert result.is_valid == expected
