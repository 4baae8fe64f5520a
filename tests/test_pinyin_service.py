"""
Tests for the pypinyin-backed pinyin service.
"""

import pytest
from hypothesis import given, strategies as st

from mandarin_lesson_generator.models import PinyinFormat, PinyinResult
from mandarin_lesson_generator.processors.pinyin_service import PypinyinService, contains_chinese


class TestPypinyinService:
    """Test romanization through pypinyin."""

    def test_tone_marks(self):
        result = PypinyinService().romanize("你好")

        assert result.success
        assert result.pinyin == "nǐ hǎo"
        assert result.format == PinyinFormat.TONE_MARKS

    def test_numbered_tones(self):
        result = PypinyinService().romanize("你好", PinyinFormat.NUMBERED)

        assert result.pinyin == "ni3 hao3"

    def test_basic_format_drops_tones(self):
        result = PypinyinService().romanize("中国", PinyinFormat.BASIC)

        assert result.pinyin == "zhong guo"

    @pytest.mark.parametrize("text", ["", "   ", None])
    def test_empty_input_fails(self, text):
        result = PypinyinService().romanize(text)

        assert not result.success
        assert result.pinyin == ""
        assert result.error

    def test_text_without_chinese_fails(self):
        result = PypinyinService().romanize("hello")

        assert not result.success
        assert "Chinese" in result.error

    def test_batch_keeps_order_and_failures(self):
        results = PypinyinService().romanize_batch(["你好", "abc", "再见"])

        assert [r.success for r in results] == [True, False, True]
        assert results[2].pinyin == "zài jiàn"

    def test_empty_batch(self):
        assert PypinyinService().romanize_batch([]) == []

    def test_contains_chinese(self):
        assert contains_chinese("abc学")
        assert not contains_chinese("abc")
        assert not contains_chinese("")


class TestPinyinServiceProperties:
    """Property-based tests for the pinyin service."""

    @pytest.mark.property
    @given(st.text(max_size=30))
    def test_every_input_gets_a_result(self, text):
        """The service never raises; failures are reported in the result."""
        result = PypinyinService().romanize(text)

        assert isinstance(result, PinyinResult)
        assert result.success or result.error, "Result has neither success nor error"
        if result.success:
            assert result.pinyin
