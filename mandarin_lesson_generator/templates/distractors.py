"""
Curated distractor pools for choice-style quiz questions.
"""

import logging
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Tuple

from ..random_source import RandomSource


logger = logging.getLogger(__name__)

COMMON_TRANSLATIONS = "common-translations"
COMMON_PINYIN = "common-pinyin"
COMMON_HANZI = "common-hanzi"

DEFAULT_POOLS: Dict[str, Tuple[str, ...]] = {
    COMMON_TRANSLATIONS: (
        "water", "food", "house", "car", "book", "school", "friend", "family",
        "work", "time", "money", "love", "good", "bad", "big", "small", "hot",
        "cold", "new", "old", "today", "tomorrow", "yesterday",
    ),
    COMMON_PINYIN: (
        "wǒ", "nǐ", "tā", "de", "shì", "yǒu", "zài", "le", "yī", "èr", "sān",
        "sì", "wǔ", "liù", "qī", "bā", "jiǔ", "shí", "lái", "qù",
    ),
    COMMON_HANZI: (
        "我", "你", "他", "的", "是", "有", "在", "了", "一", "二", "三", "四",
        "五", "六", "七", "八", "九", "十", "来", "去", "水", "书", "学校",
        "朋友", "家", "工作", "时间", "今天", "明天", "昨天",
    ),
}


class DistractorPool:
    """
    Named, immutable sets of plausible wrong answers.

    Pools are built once and shared between concurrent quiz generations;
    picking distractors never changes them.
    """

    def __init__(self, pools: Mapping[str, Iterable[str]]):
        self._pools: Mapping[str, Tuple[str, ...]] = MappingProxyType(
            {name: tuple(items) for name, items in pools.items()}
        )

    @classmethod
    def default(cls) -> "DistractorPool":
        """Pool holding the built-in translation, pinyin and hanzi candidates."""
        return cls(DEFAULT_POOLS)

    @property
    def names(self) -> List[str]:
        return list(self._pools)

    def candidates(self, pool_name: str) -> Tuple[str, ...]:
        """Return the raw candidates of a pool (empty for unknown pools)."""
        return self._pools.get(pool_name, ())

    def pick_distractors(self, pool_name: str, correct_answer: str, count: int,
                         random_source: RandomSource) -> List[str]:
        """
        Pick up to count distinct wrong answers from a named pool.

        The correct answer and duplicates are filtered out before shuffling;
        when fewer eligible candidates exist the result is simply shorter.

        Args:
            pool_name: Name of the pool to draw from
            correct_answer: Answer that must never appear among the distractors
            count: Maximum number of distractors
            random_source: Shuffling strategy

        Returns:
            List of at most count distinct distractors
        """
        if count <= 0:
            return []

        if pool_name not in self._pools:
            logger.warning(f"Unknown distractor pool '{pool_name}'")

        correct = correct_answer.strip() if correct_answer else ""
        eligible = [item for item in dict.fromkeys(self.candidates(pool_name)) if item and item != correct]
        return random_source.shuffled(eligible)[:count]
