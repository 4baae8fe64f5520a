"""
Flashcard, quiz and scheduling generators.
"""

from .flashcards import FlashcardGenerator
from .quiz import QuizGenerator
from .srs import SchedulingInitializer, SRSCache, calculate_next_review

__all__ = [
    'FlashcardGenerator',
    'QuizGenerator',
    'SchedulingInitializer',
    'SRSCache',
    'calculate_next_review',
]
