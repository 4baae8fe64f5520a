"""
Flashcard generation from enriched lesson vocabulary.

Every card type has one builder registered in a lookup table; the
generator loops over vocabulary and requested types and dispatches
through that table.
"""

import logging
import math
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config import Config
from ..errors import ErrorCode, ErrorHandler, InvalidLessonError, LessonGeneratorError, TemplateError
from ..models import (
    CardType,
    DifficultyLevel,
    EnrichedVocabularyEntry,
    Flashcard,
    FlashcardOptions,
    FlashcardResult,
    FlashcardSide,
    FlashcardSource,
    FlashcardStats,
    Lesson,
    ProcessedLessonContent,
    TextSegment,
)
from ..processors.enricher import VocabularyEnricher
from ..processors.pinyin_service import PypinyinService
from ..processors.segmenter import Segmenter
from ..templates.registry import FlashcardTemplate, TemplateRegistry
from ..validation.request_validator import RequestValidator
from .common import (
    IdAllocator,
    dedupe,
    entry_tier,
    score_difficulty,
    segments_containing,
    vocabulary_source_id,
    word_hash,
)
from .srs import SchedulingInitializer


logger = logging.getLogger(__name__)


@dataclass
class _Source:
    """Vocabulary and lesson context resolved from any supported source."""
    lesson_id: str
    vocabulary: List[EnrichedVocabularyEntry]
    segments: List[TextSegment] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    tier: Optional[DifficultyLevel] = None
    errors: list = field(default_factory=list)


@dataclass
class _CardContext:
    entry: EnrichedVocabularyEntry
    template: FlashcardTemplate
    options: FlashcardOptions
    examples: Optional[List[str]]

    @property
    def audio_id(self) -> str:
        return f"audio-{self.entry.word}"

    @property
    def optional_audio(self) -> Optional[str]:
        return self.audio_id if self.options.include_audio else None

    @property
    def optional_pinyin(self) -> Optional[str]:
        return self.entry.pinyin if self.options.include_pinyin else None


CardBuilder = Callable[[_CardContext], Tuple[FlashcardSide, FlashcardSide]]


def _build_hanzi_to_pinyin(ctx: _CardContext) -> Tuple[FlashcardSide, FlashcardSide]:
    front = FlashcardSide(content=ctx.entry.word, audio_id=ctx.optional_audio)
    back = FlashcardSide(content=ctx.entry.translation, pinyin=ctx.optional_pinyin, examples=ctx.examples)
    return front, back


def _build_hanzi_to_definition(ctx: _CardContext) -> Tuple[FlashcardSide, FlashcardSide]:
    front = FlashcardSide(content=ctx.entry.word, pinyin=ctx.optional_pinyin, audio_id=ctx.optional_audio)
    back = FlashcardSide(content=ctx.entry.translation, examples=ctx.examples)
    return front, back


def _build_pinyin_to_hanzi(ctx: _CardContext) -> Tuple[FlashcardSide, FlashcardSide]:
    front = FlashcardSide(content=ctx.entry.translation, pinyin=ctx.entry.pinyin)
    back = FlashcardSide(content=ctx.entry.word, audio_id=ctx.optional_audio, examples=ctx.examples)
    return front, back


def _build_definition_to_hanzi(ctx: _CardContext) -> Tuple[FlashcardSide, FlashcardSide]:
    front = FlashcardSide(content=ctx.entry.translation)
    back = FlashcardSide(content=ctx.entry.word, pinyin=ctx.optional_pinyin,
                         audio_id=ctx.optional_audio, examples=ctx.examples)
    return front, back


def _build_audio_to_hanzi(ctx: _CardContext) -> Tuple[FlashcardSide, FlashcardSide]:
    front = FlashcardSide(content=ctx.template.prompt or "", audio_id=ctx.audio_id)
    back = FlashcardSide(content=ctx.entry.word, pinyin=ctx.optional_pinyin, examples=ctx.examples)
    return front, back


def _build_hanzi_to_audio(ctx: _CardContext) -> Tuple[FlashcardSide, FlashcardSide]:
    front = FlashcardSide(content=f"{ctx.entry.word} {ctx.template.prompt or ''}".strip())
    back = FlashcardSide(content=ctx.entry.translation, pinyin=ctx.entry.pinyin,
                         audio_id=ctx.audio_id, examples=ctx.examples)
    return front, back


DEFAULT_CARD_BUILDERS: Dict[CardType, CardBuilder] = {
    CardType.HANZI_TO_PINYIN: _build_hanzi_to_pinyin,
    CardType.HANZI_TO_DEFINITION: _build_hanzi_to_definition,
    CardType.PINYIN_TO_HANZI: _build_pinyin_to_hanzi,
    CardType.DEFINITION_TO_HANZI: _build_definition_to_hanzi,
    CardType.AUDIO_TO_HANZI: _build_audio_to_hanzi,
    CardType.HANZI_TO_AUDIO: _build_hanzi_to_audio,
}


class FlashcardGenerator:
    """
    Generates flashcards for every (vocabulary entry, card type) pair.

    Pipeline:
    1. Resolve the source into enriched vocabulary plus lesson context
    2. Validate options, apply the difficulty filter and the maxCards cap
    3. Build each card through its type's builder
    4. Optionally attach SRS scheduling state
    """

    def __init__(self, registry: TemplateRegistry,
                 enricher: Optional[VocabularyEnricher] = None,
                 scheduler: Optional[SchedulingInitializer] = None,
                 segmenter: Optional[Segmenter] = None,
                 builders: Optional[Dict[CardType, CardBuilder]] = None):
        self.registry = registry
        self.enricher = enricher or VocabularyEnricher(PypinyinService())
        self.scheduler = scheduler or SchedulingInitializer()
        self.segmenter = segmenter or Segmenter()
        self.validator = RequestValidator()
        self._builders = dict(builders if builders is not None else DEFAULT_CARD_BUILDERS)

    def generate(self, source: FlashcardSource, options: FlashcardOptions) -> FlashcardResult:
        """
        Generate flashcards.

        Args:
            source: ProcessedLessonContent, Lesson, or list of vocabulary entries
            options: Flashcard generation options

        Returns:
            FlashcardResult; success is False whenever any error was collected

        Raises:
            InvalidLessonError: If the source is missing or a lesson has no content
        """
        start_time = time.perf_counter()
        error_handler = ErrorHandler(logger)

        resolved = self._resolve_source(source)
        error_handler.extend(resolved.errors)

        if not resolved.vocabulary:
            error_handler.add(ErrorCode.NO_VOCABULARY, "No vocabulary entries available for flashcard generation")
            return self._result([], error_handler, start_time, 0)

        option_errors = self.validator.validate_flashcard_options(options, check_kinds=False)
        if option_errors:
            for message in option_errors:
                error_handler.add(ErrorCode.VALIDATION_FAILED, message)
            return self._result([], error_handler, start_time, 0)

        vocabulary = self._apply_difficulty_filter(resolved, options.difficulty_filter)
        if not vocabulary:
            error_handler.add(ErrorCode.INSUFFICIENT_VOCABULARY,
                              "No vocabulary entries match the difficulty filter")
            return self._result([], error_handler, start_time, 0)

        templates = self._resolve_templates(dedupe(options.card_types), error_handler)
        per_type = math.floor(options.max_cards / len(templates)) if templates else 0
        if templates and per_type == 0:
            error_handler.add(ErrorCode.INSUFFICIENT_VOCABULARY,
                              f"max_cards ({options.max_cards}) is smaller than the number of "
                              f"card types ({len(templates)})")
        vocabulary = vocabulary[:per_type]

        ids = IdAllocator()
        flashcards: List[Flashcard] = []
        now = datetime.now()

        for entry in vocabulary:
            for template, builder in templates:
                try:
                    card = self._build_card(entry, template, builder, resolved, options, ids, now)
                except LessonGeneratorError as e:
                    error_handler.add_error(e.generation_error)
                    continue
                except Exception as e:
                    error_handler.add(ErrorCode.TEMPLATE_ERROR, f"Failed to build card: {e}",
                                      vocabulary_word=entry.word, item_type=template.card_type.value)
                    continue
                flashcards.append(card)

        srs_integrated = 0
        if options.srs_integration and flashcards:
            srs_result = self.scheduler.attach(flashcards, options.subject_id)
            srs_integrated = srs_result.integrated_cards
            for message in srs_result.errors:
                error_handler.add(ErrorCode.SRS_INTEGRATION_FAILED, message)

        return self._result(flashcards, error_handler, start_time, srs_integrated)

    def _resolve_source(self, source: FlashcardSource) -> _Source:
        if source is None:
            raise InvalidLessonError("Lesson is required")

        if isinstance(source, ProcessedLessonContent):
            vocabulary = list(source.vocabulary) or list(source.vocabulary_map.values())
            return _Source(lesson_id=source.lesson_id, vocabulary=vocabulary,
                           segments=list(source.segments), tags=list(source.tags),
                           tier=source.difficulty)

        if isinstance(source, Lesson):
            if source.content is None:
                raise InvalidLessonError("Lesson content cannot be null", lesson_id=source.id)
            if source.metadata is None:
                raise InvalidLessonError("Lesson metadata is required", lesson_id=source.id)
            vocabulary, errors = self.enricher.enrich_with_report(
                source.metadata.vocabulary, source.content
            )
            return _Source(
                lesson_id=source.id,
                vocabulary=vocabulary,
                segments=self.segmenter.segment(source.content),
                tags=list(source.metadata.tags),
                tier=source.metadata.difficulty,
                errors=errors,
            )

        entries = list(source)
        errors = []
        vocabulary: List[EnrichedVocabularyEntry] = []
        plain = [entry for entry in entries if not isinstance(entry, EnrichedVocabularyEntry)]
        enriched_plain: List[EnrichedVocabularyEntry] = []
        if plain:
            enriched_plain, errors = self.enricher.enrich_with_report(plain, "")
        plain_iter = iter(enriched_plain)
        for entry in entries:
            vocabulary.append(entry if isinstance(entry, EnrichedVocabularyEntry) else next(plain_iter))

        return _Source(
            lesson_id=vocabulary_source_id(entry.word for entry in vocabulary),
            vocabulary=vocabulary,
            errors=errors,
        )

    def _resolve_templates(self, card_types: Sequence, error_handler: ErrorHandler
                           ) -> List[Tuple[FlashcardTemplate, CardBuilder]]:
        resolved = []
        for card_type in card_types:
            try:
                template = self.registry.flashcard_template(card_type)
            except TemplateError as e:
                error_handler.add_error(e.generation_error)
                continue
            builder = self._builders.get(template.card_type)
            if builder is None:
                error_handler.add(ErrorCode.TEMPLATE_ERROR,
                                  f"No builder registered for card type: {card_type}",
                                  item_type=template.card_type.value)
                continue
            resolved.append((template, builder))
        return resolved

    @staticmethod
    def _apply_difficulty_filter(resolved: _Source,
                                 difficulty_filter: Optional[Sequence[DifficultyLevel]]) -> List[EnrichedVocabularyEntry]:
        if not difficulty_filter:
            return list(resolved.vocabulary)
        wanted = {DifficultyLevel(level) for level in difficulty_filter}
        return [entry for entry in resolved.vocabulary if entry_tier(entry, resolved.tier) in wanted]

    @staticmethod
    def _build_card(entry: EnrichedVocabularyEntry, template: FlashcardTemplate, builder: CardBuilder,
                    resolved: _Source, options: FlashcardOptions, ids: IdAllocator,
                    now: datetime) -> Flashcard:
        matching = segments_containing(resolved.segments, entry.word)
        examples = None
        if options.include_examples:
            examples = [segment.text for segment in matching[:Config.MAX_EXAMPLES_PER_CARD]] or None

        front, back = builder(_CardContext(entry=entry, template=template, options=options, examples=examples))

        card_type = template.card_type
        tags = dedupe([
            *resolved.tags,
            entry.difficulty.value if entry.difficulty else None,
            entry.part_of_speech,
            card_type.value,
        ])

        return Flashcard(
            id=ids.allocate(f"flashcard-{resolved.lesson_id}-{word_hash(entry.word)}-{card_type.value}"),
            lesson_id=resolved.lesson_id,
            vocabulary_entry=entry,
            front_side=front,
            back_side=back,
            card_type=card_type,
            difficulty=score_difficulty(entry_tier(entry, resolved.tier), template.difficulty_offset),
            tags=tags,
            template=template.id,
            generated_at=now,
            source_segment_ids=[segment.id for segment in matching],
        )

    @staticmethod
    def _result(flashcards: List[Flashcard], error_handler: ErrorHandler,
                start_time: float, srs_integrated: int) -> FlashcardResult:
        elapsed = time.perf_counter() - start_time
        if elapsed > Config.GENERATION_BUDGET_SECONDS:
            logger.warning(f"Flashcard generation took {elapsed:.2f}s for {len(flashcards)} cards")

        by_card_type: Dict[str, int] = {}
        for card in flashcards:
            by_card_type[card.card_type.value] = by_card_type.get(card.card_type.value, 0) + 1

        stats = FlashcardStats(
            total_generated=len(flashcards),
            by_card_type=by_card_type,
            vocabulary_words_used=len({card.vocabulary_entry.word for card in flashcards}),
            generation_time_ms=elapsed * 1000,
            srs_integrated=srs_integrated,
        )

        logger.info(f"Generated {len(flashcards)} flashcards ({len(error_handler.errors)} errors)")
        return FlashcardResult(
            success=not error_handler.has_errors(),
            flashcards=flashcards,
            stats=stats,
            generated_at=datetime.now(),
            errors=list(error_handler.errors),
        )
