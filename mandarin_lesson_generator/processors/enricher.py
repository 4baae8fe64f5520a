"""
Vocabulary enrichment: pronunciation, in-content frequency and study metadata.
"""

import logging
from typing import List, Optional, Sequence, Tuple

from ..errors import ErrorCode, GenerationError
from ..models import (
    DifficultyLevel,
    EnrichedVocabularyEntry,
    PinyinFormat,
    VocabularyEntry,
)
from .pinyin_service import PinyinService


logger = logging.getLogger(__name__)


def count_occurrences(word: str, content: str) -> int:
    """
    Count case-sensitive, non-overlapping substring occurrences of word.

    This is a raw substring count: a word that is part of a longer word is
    still counted. Empty words never occur.
    """
    if not word or not content:
        return 0
    return content.count(word)


def estimate_difficulty(word: str, frequency: int) -> DifficultyLevel:
    """Heuristic tier from word length and how often the lesson repeats it."""
    if len(word) == 1 and frequency > 2:
        return DifficultyLevel.BEGINNER
    if len(word) <= 2 and frequency > 1:
        return DifficultyLevel.BEGINNER
    if len(word) <= 3:
        return DifficultyLevel.INTERMEDIATE
    return DifficultyLevel.ADVANCED


class VocabularyEnricher:
    """
    Attaches pinyin and frequency to vocabulary entries.

    A failed pronunciation lookup degrades only that entry: its pinyin falls
    back to the word itself and an AUDIO_GENERATION_FAILED error is reported.
    Duplicate words are kept as distinct entries.
    """

    def __init__(self, pinyin_service: PinyinService,
                 pinyin_format: PinyinFormat = PinyinFormat.TONE_MARKS):
        self.pinyin_service = pinyin_service
        self.pinyin_format = pinyin_format

    def enrich(self, vocabulary: Optional[Sequence[VocabularyEntry]],
               content: Optional[str]) -> List[EnrichedVocabularyEntry]:
        """
        Enrich vocabulary entries against lesson content.

        Args:
            vocabulary: Entries to enrich (may be empty)
            content: Lesson text used for frequency counting

        Returns:
            One enriched entry per input entry, in input order
        """
        entries, _ = self.enrich_with_report(vocabulary, content)
        return entries

    def enrich_with_report(self, vocabulary: Optional[Sequence[VocabularyEntry]],
                           content: Optional[str]) -> Tuple[List[EnrichedVocabularyEntry], List[GenerationError]]:
        """
        Enrich vocabulary entries and report per-entry pronunciation failures.

        Returns:
            Tuple of (enriched entries, errors)
        """
        if not vocabulary:
            return [], []

        content = content or ""
        enriched: List[EnrichedVocabularyEntry] = []
        errors: List[GenerationError] = []

        for entry in vocabulary:
            pinyin, error = self._lookup_pinyin(entry.word)
            if error:
                errors.append(error)

            frequency = count_occurrences(entry.word, content)
            enriched.append(EnrichedVocabularyEntry(
                word=entry.word,
                translation=entry.translation,
                part_of_speech=entry.part_of_speech,
                pinyin=pinyin,
                frequency=frequency,
                study_count=0,
                mastery_level=0,
                difficulty=estimate_difficulty(entry.word, frequency),
            ))

        logger.debug(f"Enriched {len(enriched)} vocabulary entries ({len(errors)} pinyin fallbacks)")
        return enriched, errors

    def _lookup_pinyin(self, word: str) -> Tuple[str, Optional[GenerationError]]:
        try:
            result = self.pinyin_service.romanize(word, self.pinyin_format)
        except Exception as e:
            # A collaborator that raises is treated like one that reports failure
            logger.warning(f"Pinyin service raised for '{word}': {e}")
            return word, GenerationError(
                code=ErrorCode.AUDIO_GENERATION_FAILED,
                message=f"Pinyin lookup failed: {e}",
                vocabulary_word=word,
            )

        if result.success and result.pinyin:
            return result.pinyin, None

        logger.warning(f"Pinyin unavailable for '{word}': {result.error}")
        return word, GenerationError(
            code=ErrorCode.AUDIO_GENERATION_FAILED,
            message=f"Pinyin lookup failed: {result.error}",
            vocabulary_word=word,
        )
