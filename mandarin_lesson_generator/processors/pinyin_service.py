"""
Pinyin service for converting Mandarin text to pinyin.

The pronunciation lookup is the one external collaborator of the pipeline.
Services report failures inside PinyinResult instead of raising, so a bad
word never aborts a batch.
"""

import logging
import re
from abc import ABC, abstractmethod
from typing import List

from pypinyin import Style, lazy_pinyin

from ..models import PinyinFormat, PinyinResult


logger = logging.getLogger(__name__)

CJK_PATTERN = re.compile(r'[\u3400-\u4dbf\u4e00-\u9fff]')

_STYLE_BY_FORMAT = {
    PinyinFormat.BASIC: Style.NORMAL,
    PinyinFormat.NUMBERED: Style.TONE3,
    PinyinFormat.TONE_MARKS: Style.TONE,
}


def contains_chinese(text: str) -> bool:
    """Check whether text contains at least one CJK ideograph."""
    return bool(text) and CJK_PATTERN.search(text) is not None


class PinyinService(ABC):
    """Base interface for pinyin services."""

    @abstractmethod
    def romanize(self, text: str,
                 pinyin_format: PinyinFormat = PinyinFormat.TONE_MARKS) -> PinyinResult:
        """
        Convert Chinese text to pinyin.

        Args:
            text: Chinese characters
            pinyin_format: Tone style of the output

        Returns:
            PinyinResult with pinyin or error
        """
        pass

    def romanize_batch(self, texts: List[str],
                       pinyin_format: PinyinFormat = PinyinFormat.TONE_MARKS) -> List[PinyinResult]:
        """
        Romanize multiple texts, one result per text.

        Args:
            texts: List of Chinese texts
            pinyin_format: Tone style of the output

        Returns:
            List of PinyinResult objects
        """
        if not texts:
            return []
        return [self.romanize(text, pinyin_format) for text in texts]


class PypinyinService(PinyinService):
    """
    Pinyin service using the pypinyin library.

    Characters pypinyin cannot convert are passed through unchanged.
    """

    def romanize(self, text: str,
                 pinyin_format: PinyinFormat = PinyinFormat.TONE_MARKS) -> PinyinResult:
        pinyin_format = PinyinFormat(pinyin_format)

        if not text or not text.strip():
            return PinyinResult(
                text=text or "",
                pinyin="",
                success=False,
                error="Empty or whitespace-only input",
                format=pinyin_format,
            )

        if not contains_chinese(text):
            return PinyinResult(
                text=text,
                pinyin="",
                success=False,
                error="Invalid input: text must contain Chinese characters",
                format=pinyin_format,
            )

        try:
            syllables = lazy_pinyin(text, style=_STYLE_BY_FORMAT[pinyin_format])
            pinyin = ' '.join(s.strip() for s in syllables if s.strip())

            if not pinyin:
                return PinyinResult(
                    text=text,
                    pinyin="",
                    success=False,
                    error="Romanization produced no output",
                    format=pinyin_format,
                )

            return PinyinResult(text=text, pinyin=pinyin, success=True, format=pinyin_format)

        except Exception as e:
            logger.error(f"Pinyin generation failed for '{text}': {e}")
            return PinyinResult(
                text=text,
                pinyin="",
                success=False,
                error=f"Pinyin generation error: {str(e)}",
                format=pinyin_format,
            )
