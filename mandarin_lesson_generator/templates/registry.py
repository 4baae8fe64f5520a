"""
Template catalog for flashcard and quiz kinds.

Each card type and question type maps to one frozen descriptor. The
registry is built once and shared read-only between generators, so
concurrent generation calls can use it without locking.
"""

import logging
from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Tuple, Union

from ..errors import TemplateError
from ..models import CardType, DifficultyLevel, QuestionType


logger = logging.getLogger(__name__)

# Field names used in template layouts
WORD = "word"
PINYIN = "pinyin"
TRANSLATION = "translation"
AUDIO = "audio"


@dataclass(frozen=True)
class FlashcardTemplate:
    """Descriptor for one flashcard kind."""

    id: str
    name: str
    card_type: CardType
    front_fields: Tuple[str, ...]
    back_fields: Tuple[str, ...]
    supports_audio: bool
    supports_images: bool
    tier: DifficultyLevel
    difficulty_offset: int
    prompt: Optional[str] = None

    def front_template(self) -> str:
        return "<br/>".join(f"{{{{{name}}}}}" for name in self.front_fields)

    def back_template(self) -> str:
        return "<br/>".join(f"{{{{{name}}}}}" for name in self.back_fields)


@dataclass(frozen=True)
class QuizTemplate:
    """
    Descriptor for one quiz question kind.

    prompt is a str.format pattern over word, translation and pinyin.
    answer_field names the vocabulary field holding the correct answer;
    choice-style kinds also name the distractor pool their wrong options
    come from.
    """

    id: str
    name: str
    question_type: QuestionType
    prompt: str
    answer_field: str
    choice_style: bool
    supports_audio: bool
    tier: DifficultyLevel
    difficulty_offset: int
    distractor_pool: Optional[str] = None
    requires_audio: bool = False
    explanation: str = ""

    def render_prompt(self, word: str, translation: str, pinyin: str) -> str:
        return self.prompt.format(word=word, translation=translation, pinyin=pinyin)

    def render_explanation(self, word: str, translation: str, pinyin: str) -> Optional[str]:
        if not self.explanation:
            return None
        return self.explanation.format(word=word, translation=translation, pinyin=pinyin)


DEFAULT_FLASHCARD_TEMPLATES = (
    FlashcardTemplate(
        id="hanzi-to-pinyin-basic",
        name="Chinese to Pinyin",
        card_type=CardType.HANZI_TO_PINYIN,
        front_fields=(WORD,),
        back_fields=(PINYIN, TRANSLATION),
        supports_audio=True,
        supports_images=False,
        tier=DifficultyLevel.BEGINNER,
        difficulty_offset=0,
    ),
    FlashcardTemplate(
        id="hanzi-to-definition-basic",
        name="Chinese to Definition",
        card_type=CardType.HANZI_TO_DEFINITION,
        front_fields=(WORD, PINYIN),
        back_fields=(TRANSLATION,),
        supports_audio=True,
        supports_images=True,
        tier=DifficultyLevel.BEGINNER,
        difficulty_offset=0,
    ),
    FlashcardTemplate(
        id="pinyin-to-hanzi-basic",
        name="Pinyin to Chinese",
        card_type=CardType.PINYIN_TO_HANZI,
        front_fields=(PINYIN, TRANSLATION),
        back_fields=(WORD,),
        supports_audio=True,
        supports_images=False,
        tier=DifficultyLevel.INTERMEDIATE,
        difficulty_offset=1,
    ),
    FlashcardTemplate(
        id="definition-to-hanzi-basic",
        name="Definition to Chinese",
        card_type=CardType.DEFINITION_TO_HANZI,
        front_fields=(TRANSLATION,),
        back_fields=(WORD, PINYIN),
        supports_audio=True,
        supports_images=False,
        tier=DifficultyLevel.INTERMEDIATE,
        difficulty_offset=1,
    ),
    FlashcardTemplate(
        id="audio-to-hanzi-basic",
        name="Audio to Chinese",
        card_type=CardType.AUDIO_TO_HANZI,
        front_fields=(AUDIO,),
        back_fields=(WORD, PINYIN, TRANSLATION),
        supports_audio=True,
        supports_images=False,
        tier=DifficultyLevel.ADVANCED,
        difficulty_offset=2,
        prompt="(Listen and write)",
    ),
    FlashcardTemplate(
        id="hanzi-to-audio-basic",
        name="Chinese to Audio",
        card_type=CardType.HANZI_TO_AUDIO,
        front_fields=(WORD,),
        back_fields=(AUDIO, PINYIN, TRANSLATION),
        supports_audio=True,
        supports_images=False,
        tier=DifficultyLevel.INTERMEDIATE,
        difficulty_offset=1,
        prompt="(Read aloud)",
    ),
)

DEFAULT_QUIZ_TEMPLATES = (
    QuizTemplate(
        id="mc-definition-basic",
        name="Multiple Choice Definition",
        question_type=QuestionType.MULTIPLE_CHOICE_DEFINITION,
        prompt='What does "{word}" mean?',
        answer_field=TRANSLATION,
        choice_style=True,
        supports_audio=False,
        tier=DifficultyLevel.BEGINNER,
        difficulty_offset=0,
        distractor_pool="common-translations",
        explanation='"{word}" ({pinyin}) means "{translation}".',
    ),
    QuizTemplate(
        id="mc-pinyin-basic",
        name="Multiple Choice Pinyin",
        question_type=QuestionType.MULTIPLE_CHOICE_PINYIN,
        prompt='What is the pinyin for "{word}"?',
        answer_field=PINYIN,
        choice_style=True,
        supports_audio=True,
        tier=DifficultyLevel.BEGINNER,
        difficulty_offset=0,
        distractor_pool="common-pinyin",
        explanation='"{word}" is pronounced "{pinyin}".',
    ),
    QuizTemplate(
        id="mc-audio-basic",
        name="Multiple Choice Audio",
        question_type=QuestionType.MULTIPLE_CHOICE_AUDIO,
        prompt="Listen to the audio and select the correct Chinese character:",
        answer_field=WORD,
        choice_style=True,
        supports_audio=True,
        tier=DifficultyLevel.INTERMEDIATE,
        difficulty_offset=1,
        distractor_pool="common-hanzi",
        requires_audio=True,
        explanation='The audio says "{word}" ({pinyin}), meaning "{translation}".',
    ),
    QuizTemplate(
        id="chinese-to-pinyin-basic",
        name="Chinese to Pinyin",
        question_type=QuestionType.CHINESE_TO_PINYIN,
        prompt='What is the pinyin pronunciation for "{word}"?',
        answer_field=PINYIN,
        choice_style=True,
        supports_audio=False,
        tier=DifficultyLevel.BEGINNER,
        difficulty_offset=0,
        distractor_pool="common-pinyin",
        explanation='"{word}" is written "{pinyin}" in pinyin.',
    ),
    QuizTemplate(
        id="pinyin-to-chinese-basic",
        name="Pinyin to Chinese",
        question_type=QuestionType.PINYIN_TO_CHINESE,
        prompt='Which Chinese characters match the pinyin "{pinyin}"?',
        answer_field=WORD,
        choice_style=True,
        supports_audio=False,
        tier=DifficultyLevel.BEGINNER,
        difficulty_offset=0,
        distractor_pool="common-hanzi",
        explanation='"{pinyin}" is written "{word}" and means "{translation}".',
    ),
    QuizTemplate(
        id="fill-blank-basic",
        name="Fill in the Blank",
        question_type=QuestionType.FILL_IN_BLANK,
        prompt='The Chinese word for "{translation}" is _____.',
        answer_field=WORD,
        choice_style=False,
        supports_audio=False,
        tier=DifficultyLevel.INTERMEDIATE,
        difficulty_offset=2,
        explanation='"{translation}" is "{word}" ({pinyin}).',
    ),
    QuizTemplate(
        id="audio-recognition-basic",
        name="Audio Recognition",
        question_type=QuestionType.AUDIO_RECOGNITION,
        prompt="Listen and choose the Chinese characters you hear:",
        answer_field=WORD,
        choice_style=True,
        supports_audio=True,
        tier=DifficultyLevel.ADVANCED,
        difficulty_offset=2,
        distractor_pool="common-hanzi",
        requires_audio=True,
        explanation='You heard "{word}" ({pinyin}), meaning "{translation}".',
    ),
    QuizTemplate(
        id="pronunciation-match-basic",
        name="Pronunciation Match",
        question_type=QuestionType.PRONUNCIATION_MATCH,
        prompt='Match the pronunciation to "{word}":',
        answer_field=PINYIN,
        choice_style=True,
        supports_audio=True,
        tier=DifficultyLevel.INTERMEDIATE,
        difficulty_offset=0,
        distractor_pool="common-pinyin",
        explanation='"{word}" is pronounced "{pinyin}".',
    ),
)


class TemplateRegistry:
    """
    Read-only map from card and question kinds to template descriptors.

    Lookups of a kind with no registered template raise TemplateError.
    """

    def __init__(self, flashcard_templates: Iterable[FlashcardTemplate],
                 quiz_templates: Iterable[QuizTemplate]):
        self._flashcard_templates: Mapping[CardType, FlashcardTemplate] = MappingProxyType(
            {template.card_type: template for template in flashcard_templates}
        )
        self._quiz_templates: Mapping[QuestionType, QuizTemplate] = MappingProxyType(
            {template.question_type: template for template in quiz_templates}
        )
        logger.debug(
            f"Template registry ready: {len(self._flashcard_templates)} flashcard, "
            f"{len(self._quiz_templates)} quiz templates"
        )

    @classmethod
    def default(cls) -> "TemplateRegistry":
        """Registry holding the built-in templates for every kind."""
        return cls(DEFAULT_FLASHCARD_TEMPLATES, DEFAULT_QUIZ_TEMPLATES)

    @property
    def flashcard_templates(self) -> Mapping[CardType, FlashcardTemplate]:
        return self._flashcard_templates

    @property
    def quiz_templates(self) -> Mapping[QuestionType, QuizTemplate]:
        return self._quiz_templates

    def flashcard_template(self, card_type: Union[CardType, str]) -> FlashcardTemplate:
        """
        Look up the template for a card type.

        Raises:
            TemplateError: If the card type is unknown or has no template
        """
        try:
            return self._flashcard_templates[CardType(card_type)]
        except (KeyError, ValueError):
            raise TemplateError(f"Unsupported card type: {card_type}", item_type=str(card_type))

    def quiz_template(self, question_type: Union[QuestionType, str]) -> QuizTemplate:
        """
        Look up the template for a question type.

        Raises:
            TemplateError: If the question type is unknown or has no template
        """
        try:
            return self._quiz_templates[QuestionType(question_type)]
        except (KeyError, ValueError):
            raise TemplateError(f"Unsupported question type: {question_type}",
                                item_type=str(question_type))
