"""
Tests for lesson text segmentation.
"""

import pytest
from hypothesis import given, strategies as st

from mandarin_lesson_generator.models import SegmentationMode, SegmentType
from mandarin_lesson_generator.processors.segmenter import (
    Segmenter, is_chinese_char, is_punctuation_only,
)


chinese_text = st.text(
    alphabet=st.sampled_from(list("你好我是学生再见中国人。！？，\n ") + ["\r\n"]),
    max_size=80,
)


class TestSentenceSegmentation:
    """Test sentence mode boundaries."""

    def test_two_sentences_end_at_their_terminators(self):
        """Each sentence ends exactly at its terminal punctuation."""
        text = "你好！再见。"
        segments = Segmenter().segment(text, SegmentationMode.SENTENCE)

        assert len(segments) == 2
        assert segments[0].text == "你好！"
        assert segments[1].text == "再见。"
        assert text[segments[0].end_index - 1] == "！"
        assert text[segments[1].end_index - 1] == "。"

    def test_trailing_text_without_terminator_is_kept(self):
        segments = Segmenter().segment("你好。我是学生", SegmentationMode.SENTENCE)

        assert [s.text for s in segments] == ["你好。", "我是学生"]

    def test_closing_quote_stays_with_sentence(self):
        segments = Segmenter().segment("他说：“你好。”再见！", SegmentationMode.SENTENCE)

        assert segments[0].text == "他说：“你好。”"
        assert segments[1].text == "再见！"

    def test_repeated_terminators_form_one_boundary(self):
        segments = Segmenter().segment("真的吗？！好的。", SegmentationMode.SENTENCE)

        assert [s.text for s in segments] == ["真的吗？！", "好的。"]

    def test_whitespace_is_trimmed_from_segments(self):
        text = "  你好。  再见。 "
        segments = Segmenter().segment(text, SegmentationMode.SENTENCE)

        assert [s.text for s in segments] == ["你好。", "再见。"]
        for segment in segments:
            assert text[segment.start_index:segment.end_index] == segment.text

    def test_segment_ids_and_types(self):
        segments = Segmenter().segment("你好！再见。")

        assert [s.id for s in segments] == ["sentence-1", "sentence-2"]
        assert all(s.segment_type == SegmentType.SENTENCE for s in segments)


class TestOtherModes:
    """Test paragraph, section and character modes."""

    def test_paragraphs_split_on_blank_lines(self):
        text = "第一段。\n\n第二段。\r\n\r\n第三段。"
        segments = Segmenter().segment(text, SegmentationMode.PARAGRAPH)

        assert [s.text for s in segments] == ["第一段。", "第二段。", "第三段。"]

    def test_single_newline_does_not_split_paragraph(self):
        segments = Segmenter().segment("一行。\n二行。", SegmentationMode.PARAGRAPH)

        assert len(segments) == 1

    def test_sections_record_header_levels(self):
        text = "前言。\n# 见面\n你好！\n## 告别\n再见。"
        segments = Segmenter().segment(text, SegmentationMode.SECTION)

        assert [s.header_level for s in segments] == [0, 1, 2]
        assert [s.header_title for s in segments] == [None, "见面", "告别"]
        assert segments[1].text.startswith("# 见面")

    def test_text_without_headings_is_one_section(self):
        segments = Segmenter().segment("你好！再见。", SegmentationMode.SECTION)

        assert len(segments) == 1
        assert segments[0].header_level == 0

    def test_character_mode_keeps_only_chinese_characters(self):
        text = "你好, OK 再见!"
        segments = Segmenter().segment(text, SegmentationMode.CHARACTER)

        assert [s.text for s in segments] == ["你", "好", "再", "见"]
        assert all(s.segment_type == SegmentType.VOCABULARY for s in segments)
        assert segments[2].start_index == text.index("再")

    def test_unknown_mode_falls_back_to_sentence(self):
        segments = Segmenter().segment("你好！再见。", "by-magic")

        assert len(segments) == 2
        assert segments[0].id.startswith("sentence-")


class TestDegenerateInput:
    """Test empty and punctuation-only input."""

    @pytest.mark.parametrize("text", [None, "", "   ", "。！？", "…… ,.!"])
    def test_no_segments(self, text):
        assert Segmenter().segment(text) == []

    def test_punctuation_helpers(self):
        assert is_punctuation_only("。，！ ")
        assert not is_punctuation_only("好。")
        assert is_chinese_char("学")
        assert not is_chinese_char("a")


class TestSegmenterProperties:
    """Property-based tests for segmentation."""

    @pytest.mark.property
    @given(chinese_text, st.sampled_from(list(SegmentationMode)))
    def test_segments_are_ordered_and_disjoint(self, text, mode):
        """
        Segments are ordered by start index, never overlap, and each one
        is exactly the slice of the input it claims to cover.
        """
        segments = Segmenter().segment(text, mode)

        previous_end = 0
        for segment in segments:
            assert segment.start_index >= previous_end, \
                f"Segment {segment.id} overlaps the previous one"
            assert segment.start_index < segment.end_index
            assert text[segment.start_index:segment.end_index] == segment.text
            assert segment.text == segment.text.strip()
            previous_end = segment.end_index

    @pytest.mark.property
    @given(chinese_text)
    def test_sentence_mode_covers_all_chinese_characters(self, text):
        """Every Chinese character of the input lands in some sentence."""
        segments = Segmenter().segment(text, SegmentationMode.SENTENCE)
        covered = "".join(segment.text for segment in segments)

        expected = [c for c in text if is_chinese_char(c)]
        assert [c for c in covered if is_chinese_char(c)] == expected
