"""
Lesson processing: segmentation followed by vocabulary enrichment.
"""

import logging
import re
import time
import unicodedata
from datetime import datetime
from typing import Dict, List, Optional

from ..errors import ErrorCode, ErrorHandler, InvalidLessonError
from ..models import (
    EnrichedVocabularyEntry,
    Lesson,
    PinyinFormat,
    ProcessedLessonContent,
    ProcessingOptions,
    TextSegment,
    VocabularyReference,
)
from ..validation.models import ValidationResult
from .enricher import VocabularyEnricher
from .pinyin_service import PinyinService
from .segmenter import Segmenter


logger = logging.getLogger(__name__)

VALID_PINYIN = re.compile(r"^[a-zA-ZüÜāáǎàōóǒòēéěèīíǐìūúǔùǖǘǚǜńňǹḿ\s'’]*$")


def is_valid_pinyin(pinyin: str) -> bool:
    """
    Check that romanized text holds only pinyin letters once punctuation,
    digits and symbols copied through from the source are set aside.
    """
    letters = "".join(c for c in pinyin if unicodedata.category(c)[0] not in ('P', 'S', 'N'))
    return VALID_PINYIN.match(letters) is not None


class LessonProcessor:
    """
    Turns a raw lesson into ProcessedLessonContent.

    Steps:
    1. Segment the content under the requested mode
    2. Attach tone-marked pinyin to each segment (optional)
    3. Enrich the lesson vocabulary (optional)
    4. Record where vocabulary words occur in each segment
    5. Assign audio identifiers to segments (optional)
    """

    def __init__(self, segmenter: Segmenter, pinyin_service: PinyinService,
                 enricher: Optional[VocabularyEnricher] = None):
        self.segmenter = segmenter
        self.pinyin_service = pinyin_service
        self.enricher = enricher or VocabularyEnricher(pinyin_service)

    def process(self, lesson: Lesson,
                options: Optional[ProcessingOptions] = None) -> ProcessedLessonContent:
        """
        Process a lesson.

        Args:
            lesson: Lesson to process
            options: Processing options (defaults apply when omitted)

        Returns:
            ProcessedLessonContent, possibly degraded (no segments, zero frequencies)

        Raises:
            InvalidLessonError: If the lesson or its content is missing
        """
        if lesson is None:
            raise InvalidLessonError("Lesson is required")
        if lesson.content is None:
            raise InvalidLessonError("Lesson content cannot be null", lesson_id=lesson.id)
        if lesson.metadata is None:
            raise InvalidLessonError("Lesson metadata is required", lesson_id=lesson.id)

        options = options or ProcessingOptions()
        start_time = time.perf_counter()
        error_handler = ErrorHandler(logger)

        segments = self.segmenter.segment(lesson.content, options.segmentation_mode)
        if options.max_segments is not None and options.max_segments >= 0:
            segments = segments[:options.max_segments]

        pinyin_ok = True
        if options.generate_pinyin:
            pinyin_ok = self._add_pinyin_to_segments(segments, error_handler)

        vocabulary: List[EnrichedVocabularyEntry] = []
        vocabulary_map: Dict[str, EnrichedVocabularyEntry] = {}
        if options.vocabulary_enhancement:
            vocabulary, enrich_errors = self.enricher.enrich_with_report(
                lesson.metadata.vocabulary, lesson.content
            )
            error_handler.extend(enrich_errors)
            pinyin_ok = pinyin_ok and not enrich_errors
            for entry in vocabulary:
                # Map keys are unique; the first entry for a repeated word wins
                vocabulary_map.setdefault(entry.word, entry)

        self._add_vocabulary_references(segments, vocabulary_map)

        if options.prepare_audio:
            for index, segment in enumerate(segments, 1):
                segment.audio_id = f"audio-{index:03d}"
                segment.audio_ready = True

        elapsed_ms = (time.perf_counter() - start_time) * 1000
        logger.info(
            f"Processed lesson '{lesson.id}': {len(segments)} segments, "
            f"{len(vocabulary)} vocabulary entries in {elapsed_ms:.1f}ms"
        )

        return ProcessedLessonContent(
            lesson_id=lesson.id,
            segments=segments,
            vocabulary_map=vocabulary_map,
            total_segments=len(segments),
            processing_timestamp=datetime.now(),
            pinyin_generated=options.generate_pinyin and pinyin_ok,
            audio_ready=options.prepare_audio,
            vocabulary=vocabulary,
            tags=list(lesson.metadata.tags),
            difficulty=lesson.metadata.difficulty,
            errors=list(error_handler.errors),
        )

    def validate_processed_content(self, content: ProcessedLessonContent) -> ValidationResult:
        """
        Check the structure of processed content.

        Args:
            content: Output of process()

        Returns:
            ValidationResult listing every structural problem found
        """
        errors: List[str] = []

        if not content.segments:
            errors.append("Content must have at least one segment")

        if content.total_segments != len(content.segments):
            errors.append(
                f"Total segments mismatch: expected {content.total_segments}, got {len(content.segments)}"
            )

        previous_end = 0
        for segment in content.segments:
            if not segment.id or not segment.text:
                errors.append("All segments must have id and text")
            if segment.start_index < 0 or segment.end_index <= segment.start_index:
                errors.append(f"Invalid segment indices: {segment.start_index}-{segment.end_index}")
            elif segment.start_index < previous_end:
                errors.append(f"Segment {segment.id} overlaps the previous segment")
            previous_end = max(previous_end, segment.end_index)

            if content.pinyin_generated and segment.pinyin and not is_valid_pinyin(segment.pinyin):
                errors.append(f"Invalid pinyin format: {segment.pinyin}")

        for word, entry in content.vocabulary_map.items():
            if word != entry.word:
                errors.append(f"Vocabulary map key mismatch: {word} != {entry.word}")
            if content.pinyin_generated and not entry.pinyin:
                errors.append(f"Missing pinyin for vocabulary word: {word}")

        return ValidationResult(is_valid=not errors, errors=errors)

    def _add_pinyin_to_segments(self, segments: List[TextSegment], error_handler: ErrorHandler) -> bool:
        all_ok = True
        for segment in segments:
            try:
                result = self.pinyin_service.romanize(segment.text, PinyinFormat.TONE_MARKS)
            except Exception as e:
                error_handler.add(
                    ErrorCode.AUDIO_GENERATION_FAILED,
                    f"Pinyin generation failed for segment {segment.id}: {e}",
                )
                all_ok = False
                continue

            if result.success:
                segment.pinyin = result.pinyin
            else:
                # Segments without any Chinese (e.g. an English heading) have no pinyin to fail on
                segment.pinyin = None
        return all_ok

    @staticmethod
    def _add_vocabulary_references(segments: List[TextSegment],
                                   vocabulary_map: Dict[str, EnrichedVocabularyEntry]) -> None:
        for segment in segments:
            references = []
            for word, entry in vocabulary_map.items():
                start = segment.text.find(word) if word else -1
                if start != -1:
                    references.append(VocabularyReference(
                        word=word,
                        start_index=start,
                        end_index=start + len(word),
                        difficulty=entry.difficulty,
                    ))
            segment.vocabulary_words = references
