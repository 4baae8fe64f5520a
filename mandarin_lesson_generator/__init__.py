"""
Mandarin Lesson Generator.

Turns Chinese lessons into segmented, pinyin-annotated content, flashcards
and quizzes.
"""

__version__ = "0.1.0"
