"""
Tests for lesson processing and lesson loading.
"""

import json
import pytest

from conftest import DictionaryPinyinService, make_lesson
from mandarin_lesson_generator.errors import ErrorCode, InvalidLessonError
from mandarin_lesson_generator.models import (
    DifficultyLevel, ProcessingOptions, SegmentationMode, VocabularyEntry,
)
from mandarin_lesson_generator.processors import LessonProcessor, Segmenter, lesson_from_dict, load_lesson
from mandarin_lesson_generator.processors.lesson_processor import is_valid_pinyin


@pytest.fixture
def processor(pinyin_service):
    table = dict(pinyin_service.table)
    table.update({"你好！": "nǐ hǎo！", "我是学生。": "wǒ shì xué sheng。", "再见。": "zài jiàn。"})
    return LessonProcessor(Segmenter(), DictionaryPinyinService(table))


class TestLessonProcessor:
    """Test segmentation plus enrichment."""

    def test_process_greeting_lesson(self, processor, greeting_lesson):
        content = processor.process(greeting_lesson)

        assert content.lesson_id == "lesson-1"
        assert content.total_segments == 3
        assert [s.text for s in content.segments] == ["你好！", "我是学生。", "再见。"]
        assert content.segments[0].pinyin == "nǐ hǎo！"
        assert set(content.vocabulary_map) == {"你好", "学生", "再见"}
        assert content.vocabulary_map["学生"].frequency == 1
        assert content.pinyin_generated
        assert not content.audio_ready
        assert content.errors == []
        assert content.tags == ["hsk1"]
        assert content.difficulty == DifficultyLevel.BEGINNER

    def test_vocabulary_references_are_segment_relative(self, processor, greeting_lesson):
        segment = processor.process(greeting_lesson).segments[1]

        assert len(segment.vocabulary_words) == 1
        reference = segment.vocabulary_words[0]
        assert reference.word == "学生"
        assert segment.text[reference.start_index:reference.end_index] == "学生"

    def test_max_segments(self, processor, greeting_lesson):
        content = processor.process(greeting_lesson, ProcessingOptions(max_segments=2))

        assert content.total_segments == 2

    def test_prepare_audio(self, processor, greeting_lesson):
        content = processor.process(greeting_lesson, ProcessingOptions(prepare_audio=True))

        assert [s.audio_id for s in content.segments] == ["audio-001", "audio-002", "audio-003"]
        assert all(s.audio_ready for s in content.segments)
        assert content.audio_ready

    def test_skip_pinyin_and_vocabulary(self, processor, greeting_lesson):
        content = processor.process(greeting_lesson, ProcessingOptions(
            generate_pinyin=False, vocabulary_enhancement=False
        ))

        assert all(s.pinyin is None for s in content.segments)
        assert content.vocabulary_map == {}
        assert not content.pinyin_generated

    def test_character_mode(self, processor, greeting_lesson):
        content = processor.process(greeting_lesson, ProcessingOptions(
            segmentation_mode=SegmentationMode.CHARACTER, generate_pinyin=False
        ))

        assert content.total_segments == 8

    def test_first_entry_wins_for_repeated_words(self, processor):
        lesson = make_lesson([VocabularyEntry("你好", "hello"), VocabularyEntry("你好", "hi")])
        content = processor.process(lesson)

        assert content.vocabulary_map["你好"].translation == "hello"
        assert len(content.vocabulary) == 2

    def test_failed_vocabulary_pinyin(self, processor):
        content = processor.process(make_lesson([VocabularyEntry("未知", "unknown")], content="未知。"))

        assert not content.pinyin_generated
        assert content.errors[0].code == ErrorCode.AUDIO_GENERATION_FAILED

    def test_raising_pinyin_service_is_recorded(self, greeting_lesson):
        processor = LessonProcessor(Segmenter(), DictionaryPinyinService(raise_for=["再见。"]))
        content = processor.process(greeting_lesson, ProcessingOptions(vocabulary_enhancement=False))

        assert content.total_segments == 3
        assert content.errors[0].code == ErrorCode.AUDIO_GENERATION_FAILED
        assert "sentence-3" in content.errors[0].message

    def test_empty_content_yields_no_segments(self, processor, greeting_vocabulary):
        content = processor.process(make_lesson(greeting_vocabulary, content=""))

        assert content.segments == []
        assert all(entry.frequency == 0 for entry in content.vocabulary)

    def test_missing_lesson(self, processor):
        with pytest.raises(InvalidLessonError):
            processor.process(None)

    def test_null_content(self, processor, greeting_vocabulary):
        lesson = make_lesson(greeting_vocabulary)
        lesson.content = None

        with pytest.raises(InvalidLessonError):
            processor.process(lesson)

    def test_null_metadata(self, processor, greeting_vocabulary):
        lesson = make_lesson(greeting_vocabulary)
        lesson.metadata = None

        with pytest.raises(InvalidLessonError):
            processor.process(lesson)


class TestProcessedContentValidation:

    def test_valid_content(self, processor, greeting_lesson):
        content = processor.process(greeting_lesson)

        assert processor.validate_processed_content(content).is_valid

    def test_punctuation_and_digits_are_allowed_in_pinyin(self):
        assert is_valid_pinyin("nǐ hǎo ！ 3 ge")
        assert not is_valid_pinyin("nǐ 好")

    def test_detects_untransliterated_segments(self, processor, greeting_lesson):
        content = processor.process(greeting_lesson)
        content.segments[0].pinyin = "你好！"

        errors = processor.validate_processed_content(content).errors

        assert errors == ["Invalid pinyin format: 你好！"]

    def test_detects_problems(self, processor, greeting_lesson):
        content = processor.process(greeting_lesson)
        content.total_segments = 7
        content.segments[1].start_index = 0

        result = processor.validate_processed_content(content)

        assert not result.is_valid
        assert any("Total segments mismatch" in error for error in result.errors)
        assert any("overlaps" in error for error in result.errors)

    def test_empty_content_is_invalid(self, processor, greeting_vocabulary):
        content = processor.process(make_lesson(greeting_vocabulary, content=""))

        assert "Content must have at least one segment" in \
            processor.validate_processed_content(content).errors


class TestLessonLoader:
    """Test reading lessons from JSON."""

    def test_camel_case_lesson(self):
        lesson = lesson_from_dict({
            "id": "l1",
            "title": "Greetings",
            "content": "你好。",
            "metadata": {
                "difficulty": "advanced",
                "tags": ["hsk1"],
                "vocabulary": [{"word": "你好", "translation": "hello", "partOfSpeech": "interjection"}],
            },
        })

        assert lesson.metadata.difficulty == DifficultyLevel.ADVANCED
        assert lesson.metadata.vocabulary[0].part_of_speech == "interjection"

    def test_top_level_vocabulary_and_defaults(self):
        lesson = lesson_from_dict({"content": "你好。", "vocabulary": [{"word": "你好"}]})

        assert lesson.id == "lesson"
        assert lesson.title == "lesson"
        assert lesson.metadata.difficulty == DifficultyLevel.INTERMEDIATE
        assert lesson.metadata.vocabulary[0].translation == ""

    def test_unknown_difficulty_falls_back(self):
        lesson = lesson_from_dict({"content": "", "metadata": {"difficulty": "expert"}})

        assert lesson.metadata.difficulty == DifficultyLevel.INTERMEDIATE

    @pytest.mark.parametrize("data", [
        [],
        {"title": "no content"},
        {"content": 42},
        {"content": "你好", "vocabulary": [{"translation": "hello"}]},
    ])
    def test_malformed_lessons(self, data):
        with pytest.raises(InvalidLessonError):
            lesson_from_dict(data)

    def test_load_lesson_file(self, tmp_path):
        path = tmp_path / "lesson.json"
        path.write_text(json.dumps({"id": "f1", "content": "再见。",
                                    "vocabulary": [{"word": "再见", "translation": "goodbye"}]},
                                   ensure_ascii=False), encoding="utf-8")

        lesson = load_lesson(path)

        assert lesson.id == "f1"
        assert lesson.metadata.vocabulary[0].word == "再见"

    def test_missing_file(self, tmp_path):
        with pytest.raises(InvalidLessonError):
            load_lesson(tmp_path / "missing.json")

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(InvalidLessonError) as exc_info:
            load_lesson(path)

        assert exc_info.value.code == ErrorCode.INVALID_LESSON
