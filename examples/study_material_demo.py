#!/usr/bin/env python3
"""
Demonstration of the study material pipeline.

Loads the sample lesson, processes it, then generates flashcards, a quiz
and a failing request validation so each result shape can be inspected.
"""

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from mandarin_lesson_generator.api import StudyMaterialService
from mandarin_lesson_generator.models import (
    CardType, FlashcardOptions, FlashcardRequest, QuestionType, QuizOptions,
)
from mandarin_lesson_generator.processors import load_lesson
from mandarin_lesson_generator.random_source import NumpyRandomSource


SAMPLE_LESSON = os.path.join(os.path.dirname(__file__), 'sample_lesson.json')


def demonstrate_pipeline():
    """Walk one lesson through every stage of the pipeline."""
    print("=== Study Material Demo ===\n")

    service = StudyMaterialService(random_source=NumpyRandomSource(seed=7))
    lesson = load_lesson(SAMPLE_LESSON)
    print(f"Loaded lesson '{lesson.title}' with {len(lesson.metadata.vocabulary)} words\n")

    print("=== Processed Content ===")
    processed = service.process_lesson(lesson)
    for segment in processed.segments:
        print(f"  [{segment.id}] {segment.text}  ({segment.pinyin})")
    print()

    print("=== Flashcards ===")
    cards = service.generate_flashcards(processed, FlashcardOptions(
        card_types=[CardType.HANZI_TO_DEFINITION, CardType.PINYIN_TO_HANZI],
        max_cards=8,
        include_examples=True,
        srs_integration=True,
        subject_id="demo-learner",
    ))
    print(f"Success: {cards.success}, generated {cards.stats.total_generated}")
    for card in cards.flashcards:
        print(f"  {card.card_type.value:22} {card.front_side.content} -> {card.back_side.content} "
              f"(difficulty {card.difficulty}, due {card.srs_data.next_review:%Y-%m-%d})")
    print()

    print("=== Quiz ===")
    quiz = service.generate_quiz(lesson, QuizOptions(
        question_types=[QuestionType.MULTIPLE_CHOICE_DEFINITION, QuestionType.FILL_IN_BLANK],
        question_count=4,
        time_limit=120,
    ))
    for question in quiz.quiz.questions:
        print(f"  {question.question}")
        for option in question.options or []:
            marker = "*" if option == question.correct_answer else " "
            print(f"     {marker} {option}")
        if not question.options:
            print(f"     answer: {question.correct_answer}")
    print()

    print("=== Request Validation ===")
    validation = service.validate_request(FlashcardRequest(
        lesson=lesson,
        options=FlashcardOptions(card_types=[CardType.HANZI_TO_PINYIN], max_cards=100),
    ))
    print(f"Valid: {validation.is_valid}")
    for error in validation.errors:
        print(f"  - {error}")


if __name__ == "__main__":
    demonstrate_pipeline()
