"""
Pytest configuration and fixtures shared by the test suite.

Provides a dictionary-backed pinyin service, deterministic random sources
and sample lessons, and configures Hypothesis for the property-based tests.
"""

import pytest
from hypothesis import settings, Verbosity
from typing import Dict, List, Optional, Sequence

from mandarin_lesson_generator.api import StudyMaterialService
from mandarin_lesson_generator.models import (
    DifficultyLevel, Lesson, LessonMetadata, PinyinFormat, PinyinResult, VocabularyEntry,
)
from mandarin_lesson_generator.processors.enricher import VocabularyEnricher
from mandarin_lesson_generator.processors.pinyin_service import PinyinService
from mandarin_lesson_generator.random_source import RandomSource
from mandarin_lesson_generator.templates.distractors import DistractorPool
from mandarin_lesson_generator.templates.registry import TemplateRegistry


# Configure Hypothesis for property-based testing
settings.register_profile("lessons",
    max_examples=100,
    verbosity=Verbosity.normal,
    deadline=None
)
settings.load_profile("lessons")


def pytest_configure(config):
    config.addinivalue_line("markers", "property: property-based tests using Hypothesis")


KNOWN_PINYIN: Dict[str, str] = {
    "你好": "nǐ hǎo",
    "再见": "zài jiàn",
    "学生": "xué sheng",
    "老师": "lǎo shī",
    "谢谢": "xiè xie",
    "名字": "míng zi",
    "高兴": "gāo xìng",
    "认识": "rèn shi",
    "中国": "zhōng guó",
    "朋友": "péng you",
}


class DictionaryPinyinService(PinyinService):
    """Pinyin service backed by a fixed dictionary; unknown text fails."""

    def __init__(self, table: Optional[Dict[str, str]] = None, raise_for: Sequence[str] = ()):
        self.table = dict(KNOWN_PINYIN if table is None else table)
        self.raise_for = set(raise_for)
        self.calls: List[str] = []

    def romanize(self, text: str,
                 pinyin_format: PinyinFormat = PinyinFormat.TONE_MARKS) -> PinyinResult:
        self.calls.append(text)
        if text in self.raise_for:
            raise RuntimeError("pronunciation backend unavailable")
        if text in self.table:
            return PinyinResult(text=text, pinyin=self.table[text], success=True, format=pinyin_format)
        return PinyinResult(text=text, pinyin="", success=False,
                            error="Unknown word", format=pinyin_format)


class IdentityRandomSource(RandomSource):
    """Keeps every sequence in its original order."""

    def shuffled(self, items):
        return list(items)


class ReversingRandomSource(RandomSource):
    """Reverses every sequence; predictable but not the identity."""

    def shuffled(self, items):
        return list(reversed(list(items)))


def make_lesson(vocabulary: List[VocabularyEntry], content: str = "你好！我是学生。再见。",
                lesson_id: str = "lesson-1",
                difficulty: DifficultyLevel = DifficultyLevel.BEGINNER,
                tags: Optional[List[str]] = None) -> Lesson:
    return Lesson(
        id=lesson_id,
        title="Greetings",
        content=content,
        metadata=LessonMetadata(difficulty=difficulty, tags=tags or ["hsk1"], vocabulary=vocabulary),
    )


@pytest.fixture
def pinyin_service():
    """Provide a dictionary-backed pinyin service."""
    return DictionaryPinyinService()


@pytest.fixture
def enricher(pinyin_service):
    return VocabularyEnricher(pinyin_service)


@pytest.fixture
def registry():
    return TemplateRegistry.default()


@pytest.fixture
def distractor_pool():
    return DistractorPool.default()


@pytest.fixture
def identity_random():
    return IdentityRandomSource()


@pytest.fixture
def greeting_vocabulary():
    """Three vocabulary entries that all appear in the greeting lesson."""
    return [
        VocabularyEntry(word="你好", translation="hello", part_of_speech="interjection"),
        VocabularyEntry(word="学生", translation="student", part_of_speech="noun"),
        VocabularyEntry(word="再见", translation="goodbye", part_of_speech="interjection"),
    ]


@pytest.fixture
def greeting_lesson(greeting_vocabulary):
    """A short beginner lesson with three vocabulary entries."""
    return make_lesson(greeting_vocabulary)


@pytest.fixture
def service(pinyin_service, identity_random):
    """StudyMaterialService wired with deterministic collaborators."""
    return StudyMaterialService(pinyin_service=pinyin_service, random_source=identity_random)
