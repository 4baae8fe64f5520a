"""
Text segmentation for Chinese lesson content.

Boundaries are driven purely by punctuation, blank lines and markdown-style
headings; there is no linguistic word-boundary detection here. Every segment
is a half-open [start_index, end_index) slice of the original text with
surrounding whitespace trimmed, and segments never overlap.
"""

import logging
import re
import unicodedata
from typing import Callable, Dict, List, Optional, Tuple, Union

from ..models import SegmentationMode, SegmentType, TextSegment


logger = logging.getLogger(__name__)

Span = Tuple[int, int]


def is_chinese_char(char: str) -> bool:
    """Check whether a single character is a CJK unified ideograph."""
    code = ord(char)
    return 0x4E00 <= code <= 0x9FFF or 0x3400 <= code <= 0x4DBF


def is_punctuation_only(text: str) -> bool:
    """True when text holds nothing but whitespace, punctuation and symbols."""
    return all(
        char.isspace() or unicodedata.category(char)[0] in ('P', 'S')
        for char in text
    )


class Segmenter:
    """
    Splits lesson text into ordered, non-overlapping segments.

    Modes:
    - sentence: split after terminal punctuation, keeping the terminator
      (and any closing quotes right after it) with the preceding sentence
    - paragraph: split on runs of blank lines (\\n, \\r\\n and \\r all accepted)
    - section: split on markdown headings, recording the header level
    - character: one segment per Chinese character
    """

    SENTENCE_TERMINATORS = frozenset('。！？!?；…')
    CLOSING_MARKS = frozenset('”’」』）)》〉】"\'')

    PARAGRAPH_BREAK = re.compile(r'(?:[ \t]*(?:\r\n|\r|\n)){2,}')
    HEADING = re.compile(r'^(#{1,6})[ \t]+(.*?)[ \t#]*$', re.MULTILINE)

    def __init__(self):
        self._strategies: Dict[SegmentationMode, Callable[[str], List[TextSegment]]] = {
            SegmentationMode.SENTENCE: self._segment_by_sentence,
            SegmentationMode.PARAGRAPH: self._segment_by_paragraph,
            SegmentationMode.SECTION: self._segment_by_section,
            SegmentationMode.CHARACTER: self._segment_by_character,
        }

    def segment(self, text: Optional[str],
                mode: Union[SegmentationMode, str] = SegmentationMode.SENTENCE) -> List[TextSegment]:
        """
        Segment text under the given mode.

        Args:
            text: Lesson content
            mode: Segmentation mode; unknown modes fall back to sentence

        Returns:
            Segments ordered by start_index
        """
        if not text or is_punctuation_only(text):
            return []

        resolved = self.resolve_mode(mode)
        segments = self._strategies[resolved](text)
        logger.debug(f"Segmented {len(text)} chars into {len(segments)} {resolved.value} segments")
        return segments

    @staticmethod
    def resolve_mode(mode: Union[SegmentationMode, str, None]) -> SegmentationMode:
        try:
            return SegmentationMode(mode)
        except ValueError:
            logger.warning(f"Unknown segmentation mode '{mode}', falling back to sentence")
            return SegmentationMode.SENTENCE

    def _segment_by_sentence(self, text: str) -> List[TextSegment]:
        spans: List[Span] = []
        start = 0
        i = 0
        length = len(text)

        while i < length:
            if text[i] in self.SENTENCE_TERMINATORS:
                end = i + 1
                # Runs like "！？" or "。”" stay with the sentence they close
                while end < length and (text[end] in self.SENTENCE_TERMINATORS
                                        or text[end] in self.CLOSING_MARKS):
                    end += 1
                spans.append((start, end))
                start = end
                i = end
            else:
                i += 1

        if start < length:
            spans.append((start, length))

        return self._build_segments(text, spans, SegmentationMode.SENTENCE)

    def _segment_by_paragraph(self, text: str) -> List[TextSegment]:
        spans: List[Span] = []
        start = 0
        for match in self.PARAGRAPH_BREAK.finditer(text):
            spans.append((start, match.start()))
            start = match.end()
        spans.append((start, len(text)))

        return self._build_segments(text, spans, SegmentationMode.PARAGRAPH)

    def _segment_by_section(self, text: str) -> List[TextSegment]:
        headings = list(self.HEADING.finditer(text))
        if not headings:
            return self._build_segments(
                text, [(0, len(text))], SegmentationMode.SECTION, header_levels=[(0, None)]
            )

        spans: List[Span] = []
        header_levels: List[Tuple[int, Optional[str]]] = []

        # Text before the first heading is a level-0 preamble
        if headings[0].start() > 0:
            spans.append((0, headings[0].start()))
            header_levels.append((0, None))

        for index, heading in enumerate(headings):
            end = headings[index + 1].start() if index + 1 < len(headings) else len(text)
            spans.append((heading.start(), end))
            header_levels.append((len(heading.group(1)), heading.group(2).strip() or None))

        return self._build_segments(text, spans, SegmentationMode.SECTION, header_levels=header_levels)

    def _segment_by_character(self, text: str) -> List[TextSegment]:
        segments = []
        for index, char in enumerate(text):
            if is_chinese_char(char):
                segments.append(TextSegment(
                    id=f"{SegmentationMode.CHARACTER.value}-{len(segments) + 1}",
                    text=char,
                    start_index=index,
                    end_index=index + 1,
                    segment_type=SegmentType.VOCABULARY,
                ))
        return segments

    def _build_segments(self, text: str, spans: List[Span], mode: SegmentationMode,
                        header_levels: Optional[List[Tuple[int, Optional[str]]]] = None) -> List[TextSegment]:
        segments: List[TextSegment] = []

        for position, (start, end) in enumerate(spans):
            trimmed = self._trim_span(text, start, end)
            if trimmed is None:
                continue
            start, end = trimmed
            segment_text = text[start:end]
            if is_punctuation_only(segment_text):
                continue

            segment = TextSegment(
                id=f"{mode.value}-{len(segments) + 1}",
                text=segment_text,
                start_index=start,
                end_index=end,
                segment_type=SegmentType.SENTENCE,
            )
            if header_levels is not None:
                segment.header_level, segment.header_title = header_levels[position]
            segments.append(segment)

        return segments

    @staticmethod
    def _trim_span(text: str, start: int, end: int) -> Optional[Span]:
        while start < end and text[start].isspace():
            start += 1
        while end > start and text[end - 1].isspace():
            end -= 1
        if start >= end:
            return None
        return start, end
