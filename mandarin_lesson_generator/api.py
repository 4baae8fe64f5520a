"""
Service facade exposing the four study-material contracts.

Collaborators are constructor-injected and shared read-only across calls,
so one service instance can serve concurrent requests for different lessons.
"""

import logging
from typing import Optional

from .generation.flashcards import FlashcardGenerator
from .generation.quiz import QuizGenerator
from .generation.srs import SchedulingInitializer, SRSCache
from .models import (
    FlashcardOptions,
    FlashcardResult,
    FlashcardSource,
    GenerationRequest,
    Lesson,
    ProcessedLessonContent,
    ProcessingOptions,
    QuizOptions,
    QuizResult,
    default_mixed_quiz_options,
)
from .processors.enricher import VocabularyEnricher
from .processors.lesson_processor import LessonProcessor
from .processors.pinyin_service import PinyinService, PypinyinService
from .processors.segmenter import Segmenter
from .random_source import NumpyRandomSource, RandomSource
from .templates.distractors import DistractorPool
from .templates.registry import TemplateRegistry
from .validation.models import ValidationResult
from .validation.request_validator import RequestValidator


logger = logging.getLogger(__name__)


class StudyMaterialService:
    """Turns lessons into processed content, flashcards and quizzes."""

    def __init__(self, pinyin_service: Optional[PinyinService] = None,
                 segmenter: Optional[Segmenter] = None,
                 registry: Optional[TemplateRegistry] = None,
                 distractor_pool: Optional[DistractorPool] = None,
                 random_source: Optional[RandomSource] = None,
                 srs_cache: Optional[SRSCache] = None):
        self.pinyin_service = pinyin_service or PypinyinService()
        self.segmenter = segmenter or Segmenter()
        self.registry = registry or TemplateRegistry.default()
        self.distractor_pool = distractor_pool or DistractorPool.default()
        self.random_source = random_source or NumpyRandomSource()
        self.srs_cache = srs_cache if srs_cache is not None else SRSCache()

        enricher = VocabularyEnricher(self.pinyin_service)
        self.processor = LessonProcessor(self.segmenter, self.pinyin_service, enricher)
        self.flashcard_generator = FlashcardGenerator(
            self.registry,
            enricher=enricher,
            scheduler=SchedulingInitializer(self.srs_cache),
            segmenter=self.segmenter,
        )
        self.quiz_generator = QuizGenerator(
            self.registry,
            self.distractor_pool,
            random_source=self.random_source,
            enricher=enricher,
            segmenter=self.segmenter,
        )
        self.validator = RequestValidator()

    def process_lesson(self, lesson: Lesson,
                       options: Optional[ProcessingOptions] = None) -> ProcessedLessonContent:
        """
        Segment and enrich a lesson.

        Raises:
            InvalidLessonError: If the lesson or its content is missing
        """
        return self.processor.process(lesson, options)

    def generate_flashcards(self, source: FlashcardSource, options: FlashcardOptions) -> FlashcardResult:
        """
        Generate flashcards from a processed lesson, a lesson, or a vocabulary list.

        Raises:
            InvalidLessonError: If the source is missing
        """
        return self.flashcard_generator.generate(source, options)

    def generate_quiz(self, lesson: Lesson, options: Optional[QuizOptions] = None,
                      processed: Optional[ProcessedLessonContent] = None) -> QuizResult:
        """
        Generate a quiz; the default mixed-type options apply when none are given.

        Raises:
            InvalidLessonError: If the lesson or its content is missing
        """
        return self.quiz_generator.generate(lesson, options or default_mixed_quiz_options(), processed)

    def validate_request(self, request: GenerationRequest) -> ValidationResult:
        return self.validator.validate(request)
