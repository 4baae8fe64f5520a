"""
Main entry point for the Mandarin Lesson Generator.

Reads a lesson JSON file and writes processed content, flashcards or a quiz
as JSON, validates generation requests, or exports flashcards to Anki.
"""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .anki import AnkiPackageGenerator, PackageValidator
from .api import StudyMaterialService
from .config import Config
from .errors import InvalidLessonError
from .models import (
    CardType,
    DifficultyLevel,
    FlashcardOptions,
    FlashcardRequest,
    ProcessingOptions,
    QuestionType,
    QuizOptions,
    QuizRequest,
    SegmentationMode,
    default_mixed_quiz_options,
)
from .processors.lesson_loader import load_lesson
from .random_source import NumpyRandomSource
from .serialization import to_json


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_BAD_INPUT = 2

CARD_TYPE_CHOICES = [card_type.value for card_type in CardType]
QUESTION_TYPE_CHOICES = [question_type.value for question_type in QuestionType]
DIFFICULTY_CHOICES = [level.value for level in DifficultyLevel]


def setup_logging(verbose: bool = False):
    """Set up logging configuration."""
    level = logging.DEBUG if verbose else logging.INFO

    logging.basicConfig(
        level=level,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=[
            logging.StreamHandler(sys.stderr)
        ]
    )


def write_output(payload: str, output: Optional[Path]) -> None:
    if output is None:
        print(payload)
        return
    output.parent.mkdir(parents=True, exist_ok=True)
    output.write_text(payload + "\n", encoding="utf-8")
    logging.getLogger(__name__).info(f"Wrote {output}")


def flashcard_options_from_args(args) -> FlashcardOptions:
    return FlashcardOptions(
        card_types=[CardType(value) for value in args.card_types],
        max_cards=args.max_cards,
        difficulty_filter=[DifficultyLevel(value) for value in args.difficulty] if args.difficulty else None,
        include_audio=args.include_audio,
        include_pinyin=not args.no_pinyin,
        include_examples=args.include_examples,
        srs_integration=getattr(args, "srs", False),
        subject_id=getattr(args, "subject_id", None),
    )


def quiz_options_from_args(args) -> QuizOptions:
    overrides = dict(
        question_count=args.count,
        include_audio=args.include_audio,
        time_limit=args.time_limit,
        shuffle_options=not args.no_shuffle,
        prevent_repeat=not args.allow_repeat,
        focus_vocabulary=args.focus or None,
    )
    if args.question_types:
        overrides['question_types'] = [QuestionType(value) for value in args.question_types]
    if args.quiz_difficulty:
        overrides['difficulty'] = DifficultyLevel(args.quiz_difficulty)
    return default_mixed_quiz_options(**overrides)


def cmd_process(service: StudyMaterialService, args) -> int:
    lesson = load_lesson(args.lesson)
    options = ProcessingOptions(
        segmentation_mode=SegmentationMode(args.mode),
        generate_pinyin=not args.no_pinyin,
        max_segments=args.max_segments,
        vocabulary_enhancement=not args.no_vocabulary,
        prepare_audio=args.prepare_audio,
    )
    content = service.process_lesson(lesson, options)
    write_output(to_json(content), args.output)

    if args.check:
        validation = service.processor.validate_processed_content(content)
        for error in validation.errors:
            logging.getLogger(__name__).error(error)
        return EXIT_OK if validation.is_valid else EXIT_FAILED
    return EXIT_OK


def cmd_flashcards(service: StudyMaterialService, args) -> int:
    lesson = load_lesson(args.lesson)
    processed = service.process_lesson(lesson)
    result = service.generate_flashcards(processed, flashcard_options_from_args(args))
    write_output(to_json(result), args.output)
    return EXIT_OK if result.success else EXIT_FAILED


def cmd_quiz(service: StudyMaterialService, args) -> int:
    lesson = load_lesson(args.lesson)
    result = service.generate_quiz(lesson, quiz_options_from_args(args))
    write_output(to_json(result), args.output)
    return EXIT_OK if result.success else EXIT_FAILED


def cmd_validate(service: StudyMaterialService, args) -> int:
    lesson = load_lesson(args.lesson)
    if args.kind == "quiz":
        request = QuizRequest(lesson=lesson, options=quiz_options_from_args(args))
    else:
        request = FlashcardRequest(lesson=lesson, options=flashcard_options_from_args(args))

    validation = service.validate_request(request)
    write_output(to_json(validation), args.output)
    return EXIT_OK if validation.is_valid else EXIT_FAILED


def cmd_export_anki(service: StudyMaterialService, args) -> int:
    logger = logging.getLogger(__name__)
    lesson = load_lesson(args.lesson)
    processed = service.process_lesson(lesson)
    result = service.generate_flashcards(processed, flashcard_options_from_args(args))
    if not result.flashcards:
        logger.error("No flashcards generated; nothing to export")
        return EXIT_FAILED

    output = args.output
    if output is None:
        Config.ensure_directories()
        output = Config.OUTPUT_DIR / f"{lesson.id}.apkg"

    deck_name = args.deck_name or f"{Config.ANKI_DECK_NAME}::{lesson.title}"
    if not AnkiPackageGenerator().generate_package(result.flashcards, output, deck_name):
        return EXIT_FAILED
    if not PackageValidator.validate_package(output):
        return EXIT_FAILED

    logger.info(f"Exported {len(result.flashcards)} cards to {output}")
    return EXIT_OK if result.success else EXIT_FAILED


def _add_flashcard_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--card-types", nargs="+", choices=CARD_TYPE_CHOICES,
                        default=[CardType.HANZI_TO_DEFINITION.value, CardType.HANZI_TO_PINYIN.value],
                        help="Card types to generate")
    parser.add_argument("--max-cards", type=int, default=20, help="Maximum number of cards (1-50)")
    parser.add_argument("--difficulty", nargs="+", choices=DIFFICULTY_CHOICES,
                        help="Only use vocabulary of these difficulty tiers")
    parser.add_argument("--include-audio", action="store_true", help="Attach audio ids")
    parser.add_argument("--no-pinyin", action="store_true", help="Omit optional pinyin")
    parser.add_argument("--include-examples", action="store_true",
                        help="Attach example sentences from the lesson")


def _add_quiz_arguments(parser: argparse.ArgumentParser, with_audio: bool = True) -> None:
    parser.add_argument("--question-types", nargs="+", choices=QUESTION_TYPE_CHOICES,
                        help="Question types (defaults to the mixed quiz types)")
    parser.add_argument("--count", type=int, default=10, help="Number of questions (3-20)")
    if with_audio:
        parser.add_argument("--include-audio", action="store_true", help="Attach audio ids")
    parser.add_argument("--quiz-difficulty", choices=DIFFICULTY_CHOICES, help="Quiz difficulty label")
    parser.add_argument("--time-limit", type=int, default=None, help="Time limit in seconds (30-1800)")
    parser.add_argument("--no-shuffle", action="store_true", help="Keep option and question order")
    parser.add_argument("--allow-repeat", action="store_true",
                        help="Allow a word to appear in several questions of one type")
    parser.add_argument("--focus", nargs="+", help="Restrict questions to these words")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mandarin-lesson-generator",
        description="Generate flashcards and quizzes from Mandarin lessons",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s process lesson.json --mode paragraph
  %(prog)s flashcards lesson.json --card-types hanzi-to-pinyin pinyin-to-hanzi --max-cards 10
  %(prog)s quiz lesson.json --count 5 --seed 42
  %(prog)s validate lesson.json --kind flashcards --max-cards 100
  %(prog)s export-anki lesson.json -o my_deck.apkg

Exit codes:
  0 success, 1 failed generation or validation, 2 unreadable lesson
        """
    )
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    parser.add_argument("--seed", type=int, default=None, help="Seed for option shuffling")

    subparsers = parser.add_subparsers(dest="command", required=True)

    process = subparsers.add_parser("process", help="Segment and enrich a lesson")
    process.add_argument("--mode", choices=[mode.value for mode in SegmentationMode],
                         default=SegmentationMode.SENTENCE.value, help="Segmentation mode")
    process.add_argument("--no-pinyin", action="store_true", help="Skip segment pinyin")
    process.add_argument("--max-segments", type=int, default=None, help="Keep at most N segments")
    process.add_argument("--no-vocabulary", action="store_true", help="Skip vocabulary enrichment")
    process.add_argument("--prepare-audio", action="store_true", help="Assign segment audio ids")
    process.add_argument("--check", action="store_true", help="Validate the processed content")
    process.set_defaults(handler=cmd_process)

    flashcards = subparsers.add_parser("flashcards", help="Generate flashcards")
    _add_flashcard_arguments(flashcards)
    flashcards.add_argument("--srs", action="store_true", help="Attach initial SRS scheduling")
    flashcards.add_argument("--subject-id", default=None, help="Learner id for the SRS deck")
    flashcards.set_defaults(handler=cmd_flashcards)

    quiz = subparsers.add_parser("quiz", help="Generate a quiz")
    _add_quiz_arguments(quiz)
    quiz.set_defaults(handler=cmd_quiz)

    validate = subparsers.add_parser("validate", help="Validate a generation request")
    validate.add_argument("--kind", choices=["flashcards", "quiz"], default="flashcards")
    _add_flashcard_arguments(validate)
    _add_quiz_arguments(validate, with_audio=False)
    validate.set_defaults(handler=cmd_validate)

    export = subparsers.add_parser("export-anki", help="Export flashcards as an Anki package")
    _add_flashcard_arguments(export)
    export.add_argument("--deck-name", default=None, help="Anki deck name")
    export.set_defaults(handler=cmd_export_anki)

    for subparser in (process, flashcards, quiz, validate, export):
        subparser.add_argument("lesson", type=Path, help="Path to the lesson JSON file")
        subparser.add_argument("-o", "--output", type=Path, default=None,
                               help="Output file (stdout when omitted)")

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """CLI entry point; returns the process exit code."""
    parser = build_parser()
    args = parser.parse_args(argv)

    setup_logging(args.verbose)
    logger = logging.getLogger(__name__)

    service = StudyMaterialService(random_source=NumpyRandomSource(args.seed))

    try:
        return args.handler(service, args)
    except InvalidLessonError as e:
        logger.error(f"[{e.code.value}] {e}")
        return EXIT_BAD_INPUT


if __name__ == "__main__":
    sys.exit(main())
