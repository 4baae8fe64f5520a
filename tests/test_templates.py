"""
Tests for the template registry and distractor pools.
"""

import pytest
from hypothesis import given, strategies as st

from conftest import IdentityRandomSource, ReversingRandomSource
from mandarin_lesson_generator.errors import ErrorCode, TemplateError
from mandarin_lesson_generator.models import CardType, QuestionType
from mandarin_lesson_generator.random_source import NumpyRandomSource
from mandarin_lesson_generator.templates import DistractorPool, TemplateRegistry
from mandarin_lesson_generator.templates.distractors import COMMON_HANZI, COMMON_PINYIN, COMMON_TRANSLATIONS


class TestTemplateRegistry:
    """Test template lookups."""

    def test_every_kind_has_a_template(self, registry):
        for card_type in CardType:
            assert registry.flashcard_template(card_type).card_type == card_type
        for question_type in QuestionType:
            assert registry.quiz_template(question_type).question_type == question_type

    def test_lookup_by_string_value(self, registry):
        template = registry.flashcard_template("hanzi-to-pinyin")

        assert template.id == "hanzi-to-pinyin-basic"
        assert template.front_template() == "{{word}}"
        assert template.back_template() == "{{pinyin}}<br/>{{translation}}"

    def test_unknown_kind_raises_template_error(self, registry):
        with pytest.raises(TemplateError) as exc_info:
            registry.quiz_template("essay")

        assert exc_info.value.code == ErrorCode.TEMPLATE_ERROR
        assert "essay" in str(exc_info.value)

    def test_registry_without_a_kind(self):
        registry = TemplateRegistry([], [])

        with pytest.raises(TemplateError):
            registry.flashcard_template(CardType.HANZI_TO_PINYIN)

    def test_templates_are_read_only(self, registry):
        with pytest.raises(TypeError):
            registry.flashcard_templates[CardType.HANZI_TO_PINYIN] = None

    def test_choice_style_templates_name_a_pool(self, registry):
        for template in registry.quiz_templates.values():
            if template.choice_style:
                assert template.distractor_pool in DistractorPool.default().names
            else:
                assert template.question_type == QuestionType.FILL_IN_BLANK

    def test_render_prompt(self, registry):
        template = registry.quiz_template(QuestionType.PINYIN_TO_CHINESE)

        assert template.render_prompt("你好", "hello", "nǐ hǎo") == \
            'Which Chinese characters match the pinyin "nǐ hǎo"?'


class TestDistractorPool:
    """Test distractor selection."""

    def test_default_pools(self, distractor_pool):
        assert set(distractor_pool.names) == {COMMON_TRANSLATIONS, COMMON_PINYIN, COMMON_HANZI}

    def test_correct_answer_is_excluded(self, distractor_pool):
        picked = distractor_pool.pick_distractors(COMMON_TRANSLATIONS, "water", 3, IdentityRandomSource())

        assert picked == ["food", "house", "car"]

    def test_correct_answer_is_compared_trimmed(self):
        pool = DistractorPool({"p": ["a", "b", "c"]})

        assert pool.pick_distractors("p", " a ", 5, IdentityRandomSource()) == ["b", "c"]

    def test_duplicates_and_empty_candidates_are_dropped(self):
        pool = DistractorPool({"p": ["a", "a", "", "b"]})

        assert pool.pick_distractors("p", "z", 5, IdentityRandomSource()) == ["a", "b"]

    def test_random_source_decides_the_order(self):
        pool = DistractorPool({"p": ["a", "b", "c", "d"]})

        assert pool.pick_distractors("p", "z", 2, ReversingRandomSource()) == ["d", "c"]

    def test_unknown_pool_yields_nothing(self, distractor_pool):
        assert distractor_pool.pick_distractors("missing", "x", 3, IdentityRandomSource()) == []

    def test_zero_count(self, distractor_pool):
        assert distractor_pool.pick_distractors(COMMON_HANZI, "我", 0, IdentityRandomSource()) == []

    def test_source_pools_are_not_shared(self):
        source = {"p": ["a", "b"]}
        pool = DistractorPool(source)
        source["p"].append("c")

        assert pool.candidates("p") == ("a", "b")


class TestDistractorProperties:
    """Property-based tests for distractor selection."""

    @pytest.mark.property
    @given(st.sampled_from([COMMON_TRANSLATIONS, COMMON_PINYIN, COMMON_HANZI]),
           st.text(max_size=6),
           st.integers(min_value=0, max_value=40),
           st.integers(min_value=0, max_value=2 ** 32 - 1))
    def test_distractors_are_distinct_and_never_correct(self, pool_name, correct, count, seed):
        """Picked distractors are distinct, exclude the answer and respect count."""
        pool = DistractorPool.default()
        picked = pool.pick_distractors(pool_name, correct, count, NumpyRandomSource(seed))

        assert len(picked) <= count
        assert len(set(picked)) == len(picked)
        assert correct.strip() not in picked
        assert set(picked) <= set(pool.candidates(pool_name))
