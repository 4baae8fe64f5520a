"""
Anki note model and field formatting for lesson flashcards.

One note model covers every card type: the flashcard's own front and back
sides are rendered into the note fields, so the card type only changes
what ends up in each field.
"""

import html
import logging
from typing import Dict, List, Optional

import genanki

from ..config import Config
from ..models import Flashcard, FlashcardSide


logger = logging.getLogger(__name__)


class LessonCardTemplate:
    """
    Anki card template for Mandarin lesson flashcards.

    Creates cards with:
    - Front: prompt side of the flashcard (with pinyin when present)
    - Back: answer side with pinyin, example sentences and audio reference
    """

    # Fixed so that re-imports update the same note type
    MODEL_ID = 1842207715

    FIELD_NAMES = ['Front', 'FrontPinyin', 'Back', 'BackPinyin', 'Examples', 'AudioId', 'Tags']

    CSS = """
.card {
    font-family: "PingFang SC", "Noto Sans CJK SC", "Microsoft YaHei", sans-serif;
    font-size: 22px;
    line-height: 1.5;
    text-align: center;
    color: #212529;
    background-color: #fdfcf8;
    padding: 24px 16px;
}

.front, .back {
    font-size: 40px;
    letter-spacing: 0.05em;
    margin: 16px 0 8px;
}

.pinyin {
    font-family: "Helvetica Neue", Arial, sans-serif;
    font-size: 20px;
    color: #c0392b;
}

.examples {
    font-size: 18px;
    color: #5c636a;
    border-top: 1px dashed #ced4da;
    padding-top: 10px;
    margin-top: 14px;
}

.audio-id {
    font-family: monospace;
    font-size: 12px;
    color: #adb5bd;
}

.tags {
    visibility: hidden;
}

@media (max-width: 480px) {
    .front, .back {
        font-size: 32px;
    }

    .pinyin, .examples {
        font-size: 16px;
    }
}
"""

    FRONT_TEMPLATE = """
<div class="card">
    <div class="front">{{Front}}</div>
    {{#FrontPinyin}}<div class="pinyin">{{FrontPinyin}}</div>{{/FrontPinyin}}
</div>
"""

    BACK_TEMPLATE = """
<div class="card">
    <div class="front">{{Front}}</div>
    {{#FrontPinyin}}<div class="pinyin">{{FrontPinyin}}</div>{{/FrontPinyin}}

    <hr id="answer">

    <div class="back">{{Back}}</div>
    {{#BackPinyin}}<div class="pinyin">{{BackPinyin}}</div>{{/BackPinyin}}
    {{#Examples}}<div class="examples">{{Examples}}</div>{{/Examples}}
    {{#AudioId}}<div class="audio-id">{{AudioId}}</div>{{/AudioId}}
</div>
"""

    @classmethod
    def create_model(cls) -> genanki.Model:
        """
        Create the Anki model for lesson flashcards.

        Returns:
            genanki.Model: Configured Anki model
        """
        model = genanki.Model(
            model_id=cls.MODEL_ID,
            name=Config.ANKI_MODEL_NAME,
            fields=[{'name': name} for name in cls.FIELD_NAMES],
            templates=[
                {
                    'name': 'Lesson Card',
                    'qfmt': cls.FRONT_TEMPLATE,
                    'afmt': cls.BACK_TEMPLATE,
                },
            ],
            css=cls.CSS,
        )
        logger.debug(f"Created model with ID {cls.MODEL_ID}")
        return model


class CardFormatter:
    """
    Formats flashcards into Anki note fields.
    """

    @staticmethod
    def _side_audio(*sides: FlashcardSide) -> str:
        for side in sides:
            if side.audio_id:
                return side.audio_id
        return ""

    @staticmethod
    def _escape(value: Optional[str]) -> str:
        return html.escape(value.strip()) if value else ""

    @classmethod
    def format_card_fields(cls, flashcard: Flashcard) -> Dict[str, str]:
        """
        Format a flashcard into note fields.

        Args:
            flashcard: Generated flashcard

        Returns:
            Dictionary keyed by LessonCardTemplate.FIELD_NAMES
        """
        front, back = flashcard.front_side, flashcard.back_side
        examples: List[str] = back.examples or front.examples or []

        return {
            'Front': cls._escape(front.content),
            'FrontPinyin': cls._escape(front.pinyin),
            'Back': cls._escape(back.content),
            'BackPinyin': cls._escape(back.pinyin),
            'Examples': '<br>'.join(cls._escape(example) for example in examples),
            'AudioId': cls._escape(cls._side_audio(front, back)),
            'Tags': ' '.join(cls.anki_tags(flashcard.tags)),
        }

    @staticmethod
    def anki_tags(tags: List[str]) -> List[str]:
        """Anki tags cannot contain spaces."""
        return [tag.strip().replace(' ', '_') for tag in tags if tag and tag.strip()]
