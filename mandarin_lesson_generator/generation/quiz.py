"""
Quiz generation from lesson vocabulary.

Questions are produced per requested type through a builder lookup table.
Choice-style types draw their wrong options from the DistractorPool; the
only source of randomness is the injected RandomSource.
"""

import logging
import math
import time
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import Config
from ..errors import (
    ErrorCode,
    ErrorHandler,
    InvalidLessonError,
    LessonGeneratorError,
    QuestionValidationError,
    TemplateError,
)
from ..models import (
    DifficultyLevel,
    EnrichedVocabularyEntry,
    Lesson,
    ProcessedLessonContent,
    QuestionType,
    Quiz,
    QuizMetadata,
    QuizOptions,
    QuizQuestion,
    QuizResult,
    QuizStats,
    SegmentationMode,
    TextSegment,
)
from ..processors.enricher import VocabularyEnricher
from ..processors.pinyin_service import PypinyinService
from ..processors.segmenter import Segmenter
from ..random_source import NumpyRandomSource, RandomSource
from ..templates.distractors import DistractorPool
from ..templates.registry import QuizTemplate, TemplateRegistry
from ..validation.request_validator import RequestValidator
from .common import IdAllocator, dedupe, entry_tier, score_difficulty, segments_containing, word_hash


logger = logging.getLogger(__name__)


@dataclass
class _QuestionContext:
    entry: EnrichedVocabularyEntry
    template: QuizTemplate
    options: QuizOptions
    question_id: str
    difficulty: int
    sentences: List[TextSegment]


QuestionBuilder = Callable[[_QuestionContext], QuizQuestion]


class QuizGenerator:
    """
    Generates quizzes of mixed question types.

    The requested question count is split evenly across types (ceiling per
    type), the combined list is optionally shuffled, then truncated to the
    requested count.
    """

    def __init__(self, registry: TemplateRegistry, distractor_pool: DistractorPool,
                 random_source: Optional[RandomSource] = None,
                 enricher: Optional[VocabularyEnricher] = None,
                 segmenter: Optional[Segmenter] = None):
        self.registry = registry
        self.distractor_pool = distractor_pool
        self.random_source = random_source or NumpyRandomSource()
        self.enricher = enricher or VocabularyEnricher(PypinyinService())
        self.segmenter = segmenter or Segmenter()
        self.validator = RequestValidator()

        choice = self._build_choice_question
        self._builders: Dict[QuestionType, QuestionBuilder] = {
            QuestionType.MULTIPLE_CHOICE_DEFINITION: choice,
            QuestionType.MULTIPLE_CHOICE_PINYIN: choice,
            QuestionType.MULTIPLE_CHOICE_AUDIO: choice,
            QuestionType.CHINESE_TO_PINYIN: choice,
            QuestionType.PINYIN_TO_CHINESE: choice,
            QuestionType.AUDIO_RECOGNITION: choice,
            QuestionType.PRONUNCIATION_MATCH: choice,
            QuestionType.FILL_IN_BLANK: self._build_fill_in_blank_question,
        }

    def generate(self, lesson: Lesson, options: QuizOptions,
                 processed: Optional[ProcessedLessonContent] = None) -> QuizResult:
        """
        Generate a quiz for a lesson.

        Args:
            lesson: Lesson with vocabulary
            options: Quiz generation options
            processed: Output of LessonProcessor for this lesson; reused
                instead of enriching the vocabulary again

        Returns:
            QuizResult; success is False whenever any error was collected

        Raises:
            InvalidLessonError: If the lesson or its content is missing
        """
        if lesson is None:
            raise InvalidLessonError("Lesson is required")
        if lesson.content is None:
            raise InvalidLessonError("Lesson content cannot be null", lesson_id=lesson.id)
        if lesson.metadata is None:
            raise InvalidLessonError("Lesson metadata is required", lesson_id=lesson.id)

        start_time = time.perf_counter()
        error_handler = ErrorHandler(logger)

        if not lesson.metadata.vocabulary:
            error_handler.add(ErrorCode.INSUFFICIENT_VOCABULARY,
                              "Lesson must contain vocabulary entries to generate quiz questions")
            return self._result(lesson, [], options, error_handler, start_time)

        option_errors = self.validator.validate_quiz_options(options, check_kinds=False)
        if option_errors:
            for message in option_errors:
                error_handler.add(ErrorCode.VALIDATION_FAILED, message)
            return self._result(lesson, [], options, error_handler, start_time)

        vocabulary, sentences = self._prepare(lesson, processed, error_handler)
        if options.focus_vocabulary:
            focus = set(options.focus_vocabulary)
            vocabulary = [entry for entry in vocabulary if entry.word in focus]
            if not vocabulary:
                error_handler.add(ErrorCode.INSUFFICIENT_VOCABULARY,
                                  "None of the focus vocabulary appears in the lesson")
                return self._result(lesson, [], options, error_handler, start_time)

        question_types = dedupe(options.question_types)
        per_type = math.ceil(options.question_count / len(question_types))
        ids = IdAllocator()
        questions: List[QuizQuestion] = []

        for template, builder in self._resolve_templates(question_types, error_handler):
            subjects = self._subjects(vocabulary, per_type, options.prevent_repeat)
            if len(subjects) < per_type:
                logger.info(
                    f"Only {len(subjects)} distinct words for {template.question_type.value}; "
                    f"{per_type} questions requested"
                )
            for entry in subjects:
                question_id = ids.allocate(
                    f"question-{lesson.id}-{word_hash(entry.word)}-{template.question_type.value}"
                )
                context = _QuestionContext(
                    entry=entry,
                    template=template,
                    options=options,
                    question_id=question_id,
                    difficulty=score_difficulty(entry_tier(entry, lesson.metadata.difficulty),
                                                template.difficulty_offset),
                    sentences=sentences,
                )
                try:
                    questions.append(builder(context))
                except LessonGeneratorError as e:
                    error_handler.add_error(e.generation_error)
                except Exception as e:
                    error_handler.add(ErrorCode.TEMPLATE_ERROR, f"Failed to build question: {e}",
                                      vocabulary_word=entry.word,
                                      item_type=template.question_type.value)

        if options.shuffle_options:
            questions = self.random_source.shuffled(questions)
        questions = questions[:options.question_count]

        if options.time_limit and questions:
            per_question = max(1, options.time_limit // len(questions))
            for question in questions:
                question.time_limit = per_question

        return self._result(lesson, questions, options, error_handler, start_time)

    def _prepare(self, lesson: Lesson, processed: Optional[ProcessedLessonContent],
                 error_handler: ErrorHandler) -> Tuple[List[EnrichedVocabularyEntry], List[TextSegment]]:
        if processed is not None and processed.vocabulary:
            vocabulary = list(processed.vocabulary)
        else:
            vocabulary, errors = self.enricher.enrich_with_report(lesson.metadata.vocabulary, lesson.content)
            error_handler.extend(errors)
        sentences = self.segmenter.segment(lesson.content, SegmentationMode.SENTENCE)
        return vocabulary, sentences

    def _resolve_templates(self, question_types: Sequence, error_handler: ErrorHandler
                           ) -> List[Tuple[QuizTemplate, QuestionBuilder]]:
        resolved = []
        for question_type in question_types:
            try:
                template = self.registry.quiz_template(question_type)
            except TemplateError as e:
                error_handler.add_error(e.generation_error)
                continue
            builder = self._builders.get(template.question_type)
            if builder is None:
                error_handler.add(ErrorCode.TEMPLATE_ERROR,
                                  f"No builder registered for question type: {question_type}",
                                  item_type=template.question_type.value)
                continue
            resolved.append((template, builder))
        return resolved

    @staticmethod
    def _subjects(vocabulary: List[EnrichedVocabularyEntry], count: int,
                  prevent_repeat: bool) -> List[EnrichedVocabularyEntry]:
        if not prevent_repeat:
            return [vocabulary[i % len(vocabulary)] for i in range(count)]

        seen = set()
        distinct = []
        for entry in vocabulary:
            if entry.word not in seen:
                seen.add(entry.word)
                distinct.append(entry)
        return distinct[:count]

    def _audio_id(self, ctx: _QuestionContext) -> Optional[str]:
        if ctx.template.requires_audio:
            return f"audio-{ctx.entry.word}"
        if ctx.options.include_audio and ctx.template.supports_audio:
            return f"vocab-{ctx.entry.word}"
        return None

    def _build_choice_question(self, ctx: _QuestionContext) -> QuizQuestion:
        entry, template = ctx.entry, ctx.template
        correct = getattr(entry, template.answer_field)
        distractors = self.distractor_pool.pick_distractors(
            template.distractor_pool, correct, Config.QUIZ_OPTION_COUNT - 1, self.random_source
        )
        options = [correct, *distractors]
        if ctx.options.shuffle_options:
            options = self.random_source.shuffled(options)

        if len(options) != Config.QUIZ_OPTION_COUNT or len(set(options)) != len(options) \
                or options.count(correct) != 1:
            raise QuestionValidationError(
                f"Could not build {Config.QUIZ_OPTION_COUNT} distinct options "
                f"(got {len(set(options))})",
                template.question_type.value,
                entry.word,
            )

        return QuizQuestion(
            id=ctx.question_id,
            type=template.question_type,
            question=template.render_prompt(entry.word, entry.translation, entry.pinyin),
            correct_answer=correct,
            difficulty=ctx.difficulty,
            options=options,
            explanation=template.render_explanation(entry.word, entry.translation, entry.pinyin),
            audio_id=self._audio_id(ctx),
            vocabulary_word=entry.word,
        )

    def _build_fill_in_blank_question(self, ctx: _QuestionContext) -> QuizQuestion:
        entry, template = ctx.entry, ctx.template
        matching = segments_containing(ctx.sentences, entry.word)
        if matching:
            blanked = matching[0].text.replace(entry.word, Config.BLANK_MARKER)
            prompt = f'Fill in the blank ("{entry.translation}"): {blanked}'
        else:
            prompt = template.render_prompt(entry.word, entry.translation, entry.pinyin)

        return QuizQuestion(
            id=ctx.question_id,
            type=template.question_type,
            question=prompt,
            correct_answer=getattr(entry, template.answer_field),
            difficulty=ctx.difficulty,
            explanation=template.render_explanation(entry.word, entry.translation, entry.pinyin),
            audio_id=self._audio_id(ctx),
            vocabulary_word=entry.word,
        )

    @staticmethod
    def _result(lesson: Lesson, questions: List[QuizQuestion], options: Optional[QuizOptions],
                error_handler: ErrorHandler, start_time: float) -> QuizResult:
        elapsed = time.perf_counter() - start_time
        if elapsed > Config.GENERATION_BUDGET_SECONDS:
            logger.warning(f"Quiz generation took {elapsed:.2f}s for {len(questions)} questions")

        by_question_type: Dict[str, int] = {}
        for question in questions:
            by_question_type[question.type.value] = by_question_type.get(question.type.value, 0) + 1

        vocabulary_focus = dedupe(question.vocabulary_word for question in questions)
        difficulty = options.difficulty if options is not None else DifficultyLevel.INTERMEDIATE
        generated_at = datetime.now()

        quiz = Quiz(
            id=f"quiz-{lesson.id}",
            lesson_id=lesson.id,
            title=f"{lesson.title} - Quiz",
            questions=questions,
            metadata=QuizMetadata(
                total_questions=len(questions),
                estimated_time=len(questions) * Config.SECONDS_PER_QUESTION,
                difficulty=difficulty,
                vocabulary_focus=vocabulary_focus,
                includes_audio=any(question.audio_id for question in questions),
                time_limit=options.time_limit if options is not None else None,
            ),
            generated_at=generated_at,
        )
        stats = QuizStats(
            total_generated=len(questions),
            by_question_type=by_question_type,
            vocabulary_words_used=len(vocabulary_focus),
            generation_time_ms=elapsed * 1000,
            audio_generated=sum(1 for question in questions if question.audio_id),
        )

        logger.info(f"Generated quiz '{quiz.id}' with {len(questions)} questions "
                    f"({len(error_handler.errors)} errors)")
        return QuizResult(
            success=not error_handler.has_errors(),
            quiz=quiz,
            stats=stats,
            generated_at=generated_at,
            errors=list(error_handler.errors),
        )
