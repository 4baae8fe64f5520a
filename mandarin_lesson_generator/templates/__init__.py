"""
Template catalog and distractor pools shared by the generators.
"""

from .registry import FlashcardTemplate, QuizTemplate, TemplateRegistry
from .distractors import DistractorPool

__all__ = [
    'FlashcardTemplate',
    'QuizTemplate',
    'TemplateRegistry',
    'DistractorPool',
]
