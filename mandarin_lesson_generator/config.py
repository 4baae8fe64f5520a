"""
Configuration settings for the Mandarin Lesson Generator.
"""

from pathlib import Path


class Config:
    """Configuration class for application settings."""

    # Project paths
    PROJECT_ROOT = Path(__file__).parent.parent
    OUTPUT_DIR = PROJECT_ROOT / "output"

    # Request bounds (inclusive)
    MIN_MAX_CARDS = 1
    MAX_MAX_CARDS = 50
    MIN_QUESTION_COUNT = 3
    MAX_QUESTION_COUNT = 20
    MIN_TIME_LIMIT = 30  # seconds
    MAX_TIME_LIMIT = 1800  # seconds

    # Difficulty scoring
    MIN_DIFFICULTY = 1
    MAX_DIFFICULTY = 5
    DEFAULT_BASE_DIFFICULTY = 3

    # Quiz settings
    QUIZ_OPTION_COUNT = 4
    SECONDS_PER_QUESTION = 30
    BLANK_MARKER = "_____"

    # Flashcard settings
    MAX_EXAMPLES_PER_CARD = 2

    # SRS settings (SM-2)
    SRS_SYSTEM_ID = "local-srs-v1"
    SRS_INITIAL_INTERVAL = 1  # days
    SRS_INITIAL_EASE_FACTOR = 2.5
    SRS_MIN_EASE_FACTOR = 1.3
    SRS_EASE_PENALTY = 0.2
    SRS_FAILURE_THRESHOLD = 3
    SRS_SECOND_INTERVAL = 6  # days
    ANONYMOUS_DECK_ID = "anonymous-deck"

    # Soft performance budget for a single generation call
    GENERATION_BUDGET_SECONDS = 2.0

    # Anki settings
    ANKI_MODEL_NAME = "Mandarin Lesson Flashcard"
    ANKI_DECK_NAME = "Mandarin Lessons"

    @classmethod
    def ensure_directories(cls):
        """Create necessary directories if they don't exist."""
        cls.OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
