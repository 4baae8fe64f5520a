"""
Helpers shared by the flashcard and quiz generators.
"""

import hashlib
import logging
from typing import Dict, Iterable, List, Optional, Sequence

from ..config import Config
from ..models import DifficultyLevel, EnrichedVocabularyEntry, TextSegment


logger = logging.getLogger(__name__)

_BASE_DIFFICULTY = {
    DifficultyLevel.BEGINNER: 2,
    DifficultyLevel.INTERMEDIATE: 3,
    DifficultyLevel.ADVANCED: 4,
}


def word_hash(word: str) -> str:
    """Short stable hash of a word, safe to embed in identifiers."""
    return hashlib.md5(word.encode("utf-8")).hexdigest()[:8]


def vocabulary_source_id(words: Iterable[str]) -> str:
    """Lesson id for a bare vocabulary list, derived from its words."""
    digest = hashlib.md5("|".join(words).encode("utf-8")).hexdigest()[:8]
    return f"vocabulary-{digest}"


def score_difficulty(tier: Optional[DifficultyLevel], offset: int) -> int:
    """
    Combine a tier with a per-kind complexity offset.

    Returns:
        Integer difficulty clamped to [MIN_DIFFICULTY, MAX_DIFFICULTY]
    """
    try:
        base = _BASE_DIFFICULTY.get(DifficultyLevel(tier), Config.DEFAULT_BASE_DIFFICULTY)
    except ValueError:
        base = Config.DEFAULT_BASE_DIFFICULTY
    return max(Config.MIN_DIFFICULTY, min(Config.MAX_DIFFICULTY, base + offset))


def entry_tier(entry: EnrichedVocabularyEntry,
               lesson_tier: Optional[DifficultyLevel]) -> Optional[DifficultyLevel]:
    return entry.difficulty or lesson_tier


class IdAllocator:
    """
    Hands out ids unique within one generation run.

    The first request for a key returns it unchanged; later requests for the
    same key get a -2, -3, ... suffix. Allocation order is deterministic, so
    identical inputs yield identical id sequences.
    """

    def __init__(self):
        self._seen: Dict[str, int] = {}

    def allocate(self, key: str) -> str:
        count = self._seen.get(key, 0) + 1
        self._seen[key] = count
        return key if count == 1 else f"{key}-{count}"


def segments_containing(segments: Sequence[TextSegment], word: str) -> List[TextSegment]:
    if not word:
        return []
    return [segment for segment in segments if word in segment.text]


def dedupe(values: Iterable) -> List:
    """Drop duplicates and empty values, keeping first-seen order."""
    seen = set()
    result = []
    for value in values:
        if value and value not in seen:
            seen.add(value)
            result.append(value)
    return result
