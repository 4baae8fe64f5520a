"""
Core data models for the Mandarin Lesson Generator.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional, Union

from .errors import GenerationError


class DifficultyLevel(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SegmentType(str, Enum):
    SENTENCE = "sentence"
    VOCABULARY = "vocabulary"
    PUNCTUATION = "punctuation"


class SegmentationMode(str, Enum):
    SENTENCE = "sentence"
    PARAGRAPH = "paragraph"
    SECTION = "section"
    CHARACTER = "character"


class PinyinFormat(str, Enum):
    BASIC = "basic"
    NUMBERED = "numbered"
    TONE_MARKS = "tone-marks"


class CardType(str, Enum):
    HANZI_TO_PINYIN = "hanzi-to-pinyin"
    HANZI_TO_DEFINITION = "hanzi-to-definition"
    PINYIN_TO_HANZI = "pinyin-to-hanzi"
    DEFINITION_TO_HANZI = "definition-to-hanzi"
    AUDIO_TO_HANZI = "audio-to-hanzi"
    HANZI_TO_AUDIO = "hanzi-to-audio"


class QuestionType(str, Enum):
    MULTIPLE_CHOICE_DEFINITION = "multiple-choice-definition"
    MULTIPLE_CHOICE_PINYIN = "multiple-choice-pinyin"
    MULTIPLE_CHOICE_AUDIO = "multiple-choice-audio"
    CHINESE_TO_PINYIN = "chinese-to-pinyin"
    PINYIN_TO_CHINESE = "pinyin-to-chinese"
    FILL_IN_BLANK = "fill-in-blank"
    AUDIO_RECOGNITION = "audio-recognition"
    PRONUNCIATION_MATCH = "pronunciation-match"


@dataclass
class VocabularyEntry:
    """A vocabulary word listed in a lesson."""
    word: str
    translation: str
    part_of_speech: Optional[str] = None


@dataclass
class EnrichedVocabularyEntry(VocabularyEntry):
    """Vocabulary entry with pronunciation and in-content frequency attached."""
    pinyin: str = ""
    frequency: int = 0
    study_count: int = 0
    mastery_level: int = 0
    difficulty: Optional[DifficultyLevel] = None


@dataclass
class LessonMetadata:
    difficulty: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    tags: List[str] = field(default_factory=list)
    source: Optional[str] = None
    vocabulary: List[VocabularyEntry] = field(default_factory=list)


@dataclass
class Lesson:
    """A raw lesson; treated as immutable input to the pipeline."""
    id: str
    title: str
    content: str
    description: str = ""
    metadata: LessonMetadata = field(default_factory=LessonMetadata)


@dataclass
class VocabularyReference:
    """A vocabulary word located inside a segment (offsets relative to the segment)."""
    word: str
    start_index: int
    end_index: int
    difficulty: Optional[DifficultyLevel] = None


@dataclass
class TextSegment:
    """A contiguous slice [start_index, end_index) of the lesson content."""
    id: str
    text: str
    start_index: int
    end_index: int
    segment_type: SegmentType = SegmentType.SENTENCE
    pinyin: Optional[str] = None
    translation: Optional[str] = None
    header_level: Optional[int] = None
    header_title: Optional[str] = None
    audio_id: Optional[str] = None
    audio_ready: bool = False
    vocabulary_words: List[VocabularyReference] = field(default_factory=list)


@dataclass
class ProcessingOptions:
    segmentation_mode: SegmentationMode = SegmentationMode.SENTENCE
    generate_pinyin: bool = True
    max_segments: Optional[int] = None
    vocabulary_enhancement: bool = True
    prepare_audio: bool = False


@dataclass
class ProcessedLessonContent:
    lesson_id: str
    segments: List[TextSegment]
    vocabulary_map: Dict[str, EnrichedVocabularyEntry]
    total_segments: int
    processing_timestamp: datetime
    pinyin_generated: bool
    audio_ready: bool
    vocabulary: List[EnrichedVocabularyEntry] = field(default_factory=list)
    tags: List[str] = field(default_factory=list)
    difficulty: Optional[DifficultyLevel] = None
    errors: List[GenerationError] = field(default_factory=list)


@dataclass
class PinyinResult:
    """Result of romanizing one piece of text."""
    text: str
    pinyin: str
    success: bool
    error: Optional[str] = None
    format: PinyinFormat = PinyinFormat.TONE_MARKS


@dataclass
class SRSData:
    card_id: str
    deck_id: str
    interval: int
    ease_factor: float
    review_count: int
    next_review: datetime
    repetition: int = 0
    last_reviewed: Optional[datetime] = None


@dataclass
class SRSIntegrationResult:
    success: bool
    integrated_cards: int
    srs_system_id: str
    deck_id: Optional[str] = None
    errors: List[str] = field(default_factory=list)


@dataclass
class FlashcardSide:
    content: str
    pinyin: Optional[str] = None
    audio_id: Optional[str] = None
    image_url: Optional[str] = None
    examples: Optional[List[str]] = None


@dataclass
class Flashcard:
    id: str
    lesson_id: str
    vocabulary_entry: EnrichedVocabularyEntry
    front_side: FlashcardSide
    back_side: FlashcardSide
    card_type: CardType
    difficulty: int
    tags: List[str]
    template: str
    generated_at: datetime
    source_segment_ids: List[str] = field(default_factory=list)
    srs_data: Optional[SRSData] = None


@dataclass
class FlashcardOptions:
    card_types: List[CardType]
    max_cards: int = 20
    difficulty_filter: Optional[List[DifficultyLevel]] = None
    include_audio: bool = False
    include_pinyin: bool = True
    include_examples: bool = False
    srs_integration: bool = False
    subject_id: Optional[str] = None


@dataclass
class FlashcardStats:
    total_generated: int = 0
    by_card_type: Dict[str, int] = field(default_factory=dict)
    vocabulary_words_used: int = 0
    generation_time_ms: float = 0.0
    srs_integrated: int = 0


@dataclass
class FlashcardResult:
    success: bool
    flashcards: List[Flashcard]
    stats: FlashcardStats
    generated_at: datetime
    errors: List[GenerationError] = field(default_factory=list)


@dataclass
class QuizQuestion:
    id: str
    type: QuestionType
    question: str
    correct_answer: str
    difficulty: int
    options: Optional[List[str]] = None
    explanation: Optional[str] = None
    audio_id: Optional[str] = None
    vocabulary_word: Optional[str] = None
    time_limit: Optional[int] = None


@dataclass
class QuizOptions:
    question_types: List[QuestionType]
    question_count: int = 10
    difficulty: DifficultyLevel = DifficultyLevel.INTERMEDIATE
    include_audio: bool = False
    time_limit: Optional[int] = None
    shuffle_options: bool = True
    prevent_repeat: bool = True
    focus_vocabulary: Optional[List[str]] = None


@dataclass
class QuizMetadata:
    total_questions: int
    estimated_time: int
    difficulty: DifficultyLevel
    vocabulary_focus: List[str]
    includes_audio: bool
    time_limit: Optional[int] = None


@dataclass
class Quiz:
    id: str
    lesson_id: str
    title: str
    questions: List[QuizQuestion]
    metadata: QuizMetadata
    generated_at: datetime


@dataclass
class QuizStats:
    total_generated: int = 0
    by_question_type: Dict[str, int] = field(default_factory=dict)
    vocabulary_words_used: int = 0
    generation_time_ms: float = 0.0
    audio_generated: int = 0


@dataclass
class QuizResult:
    success: bool
    quiz: Quiz
    stats: QuizStats
    generated_at: datetime
    errors: List[GenerationError] = field(default_factory=list)


@dataclass
class FlashcardRequest:
    lesson: Optional[Lesson]
    options: Optional[FlashcardOptions]


@dataclass
class QuizRequest:
    lesson: Optional[Lesson]
    options: Optional[QuizOptions]


GenerationRequest = Union[FlashcardRequest, QuizRequest]
FlashcardSource = Union[ProcessedLessonContent, Lesson, List[VocabularyEntry]]


def default_mixed_quiz_options(**overrides) -> QuizOptions:
    """Mixed-type quiz: both hanzi<->pinyin directions plus the classic choice types."""
    options = QuizOptions(
        question_types=[
            QuestionType.CHINESE_TO_PINYIN,
            QuestionType.PINYIN_TO_CHINESE,
            QuestionType.MULTIPLE_CHOICE_DEFINITION,
            QuestionType.MULTIPLE_CHOICE_PINYIN,
        ],
        question_count=10,
        difficulty=DifficultyLevel.INTERMEDIATE,
        include_audio=False,
        shuffle_options=True,
        prevent_repeat=True,
    )
    for key, value in overrides.items():
        setattr(options, key, value)
    return options
