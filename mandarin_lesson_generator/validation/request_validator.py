"""
Shape validation for flashcard and quiz generation requests.

Checks are pure: they look only at the request itself, never at runtime
state such as distractor pool contents.
"""

import logging
from typing import Iterable, List, Optional, Type

from ..config import Config
from ..models import (
    CardType,
    DifficultyLevel,
    FlashcardOptions,
    FlashcardRequest,
    GenerationRequest,
    Lesson,
    QuestionType,
    QuizOptions,
    QuizRequest,
)
from .models import ValidationResult


logger = logging.getLogger(__name__)


def _invalid_values(values: Iterable, enum_cls: Type) -> List[str]:
    invalid = []
    for value in values:
        try:
            enum_cls(value)
        except ValueError:
            invalid.append(str(value))
    return invalid


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


class RequestValidator:
    """Validates generation requests before any generation work runs."""

    def validate(self, request: GenerationRequest) -> ValidationResult:
        """
        Validate a flashcard or quiz request.

        Args:
            request: FlashcardRequest or QuizRequest

        Returns:
            ValidationResult with every violation found
        """
        errors: List[str] = []

        if request is None:
            return ValidationResult(is_valid=False, errors=["Request is required"])

        errors.extend(self._validate_lesson(request.lesson))

        if isinstance(request, FlashcardRequest):
            errors.extend(self.validate_flashcard_options(request.options))
        elif isinstance(request, QuizRequest):
            errors.extend(self.validate_quiz_options(request.options))
        else:
            errors.append(f"Unsupported request type: {type(request).__name__}")

        if errors:
            logger.debug(f"Request validation failed with {len(errors)} error(s)")
        return ValidationResult(is_valid=not errors, errors=errors)

    def validate_flashcard_options(self, options: Optional[FlashcardOptions],
                                   check_kinds: bool = True) -> List[str]:
        """
        Return the violations found in flashcard options.

        Args:
            options: Options to check
            check_kinds: Also reject card types outside the known set
        """
        if options is None:
            return ["Flashcard options are required"]

        errors = []
        max_cards = options.max_cards
        if not _is_int(max_cards) or not Config.MIN_MAX_CARDS <= max_cards <= Config.MAX_MAX_CARDS:
            errors.append(
                f"maxCards must be between {Config.MIN_MAX_CARDS} and {Config.MAX_MAX_CARDS} "
                f"(received: {max_cards})"
            )

        if not options.card_types:
            errors.append("At least one card type is required")
        elif check_kinds:
            invalid = _invalid_values(options.card_types, CardType)
            if invalid:
                errors.append(f"Invalid card types: {', '.join(invalid)}")

        errors.extend(self._validate_difficulties(options.difficulty_filter or []))
        return errors

    def validate_quiz_options(self, options: Optional[QuizOptions],
                              check_kinds: bool = True) -> List[str]:
        """Return the violations found in quiz options."""
        if options is None:
            return ["Quiz options are required"]

        errors = []
        count = options.question_count
        if not _is_int(count) or not Config.MIN_QUESTION_COUNT <= count <= Config.MAX_QUESTION_COUNT:
            errors.append(
                f"questionCount must be between {Config.MIN_QUESTION_COUNT} and "
                f"{Config.MAX_QUESTION_COUNT} (received: {count})"
            )

        if not options.question_types:
            errors.append("At least one question type is required")
        elif check_kinds:
            invalid = _invalid_values(options.question_types, QuestionType)
            if invalid:
                errors.append(f"Invalid question types: {', '.join(invalid)}")

        time_limit = options.time_limit
        if time_limit is not None and (
            not _is_int(time_limit) or not Config.MIN_TIME_LIMIT <= time_limit <= Config.MAX_TIME_LIMIT
        ):
            errors.append(
                f"timeLimit must be between {Config.MIN_TIME_LIMIT} and {Config.MAX_TIME_LIMIT} "
                f"seconds (received: {time_limit})"
            )

        if options.difficulty is not None:
            errors.extend(self._validate_difficulties([options.difficulty]))
        return errors

    @staticmethod
    def _validate_lesson(lesson: Optional[Lesson]) -> List[str]:
        if lesson is None:
            return ["Lesson is required"]
        if lesson.metadata is None or not lesson.metadata.vocabulary:
            return ["Lesson must contain vocabulary entries"]
        return []

    @staticmethod
    def _validate_difficulties(values: Iterable) -> List[str]:
        invalid = _invalid_values(values, DifficultyLevel)
        if invalid:
            return [f"Invalid difficulty levels: {', '.join(invalid)}"]
        return []
