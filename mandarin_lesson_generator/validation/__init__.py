"""
Request and content validation for the Mandarin Lesson Generator.
"""

from .models import ValidationResult
from .request_validator import RequestValidator

__all__ = [
    'ValidationResult',
    'RequestValidator',
]
