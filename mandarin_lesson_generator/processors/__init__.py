"""
Lesson processing: segmentation, pronunciation and vocabulary enrichment.
"""

from .pinyin_service import PinyinService, PypinyinService
from .segmenter import Segmenter
from .enricher import VocabularyEnricher
from .lesson_processor import LessonProcessor
from .lesson_loader import load_lesson, lesson_from_dict

__all__ = [
    'PinyinService',
    'PypinyinService',
    'Segmenter',
    'VocabularyEnricher',
    'LessonProcessor',
    'load_lesson',
    'lesson_from_dict',
]
