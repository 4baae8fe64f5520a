"""
Anki package export for generated flashcards.
"""

from .templates import LessonCardTemplate, CardFormatter
from .package_generator import AnkiPackageGenerator, PackageValidator

__all__ = [
    'LessonCardTemplate',
    'CardFormatter',
    'AnkiPackageGenerator',
    'PackageValidator',
]
