"""
Error handling for the Mandarin Lesson Generator.

Errors are codes plus a structured payload. Structural failures (a missing
lesson, null content) are raised as exceptions; everything else is collected
by an ErrorHandler and carried inside the returned result object.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class ErrorCode(str, Enum):
    """Closed set of generation error codes."""
    INVALID_LESSON = "INVALID_LESSON"
    NO_VOCABULARY = "NO_VOCABULARY"
    INSUFFICIENT_VOCABULARY = "INSUFFICIENT_VOCABULARY"
    TEMPLATE_ERROR = "TEMPLATE_ERROR"
    SRS_INTEGRATION_FAILED = "SRS_INTEGRATION_FAILED"
    AUDIO_GENERATION_FAILED = "AUDIO_GENERATION_FAILED"
    VALIDATION_FAILED = "VALIDATION_FAILED"


class ErrorSeverity(Enum):
    """Error severity levels."""
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


# Codes that abort a call rather than degrade it
_SEVERITY_BY_CODE = {
    ErrorCode.INVALID_LESSON: ErrorSeverity.CRITICAL,
    ErrorCode.NO_VOCABULARY: ErrorSeverity.ERROR,
    ErrorCode.INSUFFICIENT_VOCABULARY: ErrorSeverity.ERROR,
    ErrorCode.VALIDATION_FAILED: ErrorSeverity.ERROR,
    ErrorCode.TEMPLATE_ERROR: ErrorSeverity.ERROR,
    ErrorCode.SRS_INTEGRATION_FAILED: ErrorSeverity.WARNING,
    ErrorCode.AUDIO_GENERATION_FAILED: ErrorSeverity.WARNING,
}


@dataclass
class GenerationError:
    """Represents a generation error with optional word/type context."""
    code: ErrorCode
    message: str
    vocabulary_word: Optional[str] = None
    item_type: Optional[str] = None
    details: Dict[str, Any] = field(default_factory=dict)

    @property
    def severity(self) -> ErrorSeverity:
        return _SEVERITY_BY_CODE.get(self.code, ErrorSeverity.ERROR)


class LessonGeneratorError(Exception):
    """Base exception for Mandarin Lesson Generator errors."""

    def __init__(self, generation_error: GenerationError):
        self.generation_error = generation_error
        super().__init__(generation_error.message)

    @property
    def code(self) -> ErrorCode:
        return self.generation_error.code


class InvalidLessonError(LessonGeneratorError):
    """Raised when a lesson is missing or structurally malformed."""

    def __init__(self, message: str, **details):
        super().__init__(GenerationError(
            code=ErrorCode.INVALID_LESSON,
            message=message,
            details=details,
        ))


class TemplateError(LessonGeneratorError):
    """Raised by builders when a card or question kind cannot be rendered."""

    def __init__(self, message: str, item_type: Optional[str] = None,
                 vocabulary_word: Optional[str] = None):
        super().__init__(GenerationError(
            code=ErrorCode.TEMPLATE_ERROR,
            message=message,
            item_type=item_type,
            vocabulary_word=vocabulary_word,
        ))


class QuestionValidationError(LessonGeneratorError):
    """Raised when a built quiz question breaks the option rules."""

    def __init__(self, message: str, question_type: Optional[str] = None,
                 vocabulary_word: Optional[str] = None):
        super().__init__(GenerationError(
            code=ErrorCode.VALIDATION_FAILED,
            message=message,
            item_type=question_type,
            vocabulary_word=vocabulary_word,
        ))


class ErrorHandler:
    """
    Collects and logs the non-fatal errors of one generation call.

    A fresh handler is created per call so that independent calls never
    share error state.
    """

    def __init__(self, logger: Optional[logging.Logger] = None):
        self.logger = logger or logging.getLogger(__name__)
        self.errors: List[GenerationError] = []

    def add_error(self, error: GenerationError) -> None:
        """Add an error to the collection."""
        self.errors.append(error)

        log_level = {
            ErrorSeverity.WARNING: logging.WARNING,
            ErrorSeverity.ERROR: logging.ERROR,
            ErrorSeverity.CRITICAL: logging.CRITICAL,
        }[error.severity]

        context = ""
        if error.vocabulary_word:
            context += f" (word: {error.vocabulary_word})"
        if error.item_type:
            context += f" (type: {error.item_type})"
        self.logger.log(log_level, f"[{error.code.value}] {error.message}{context}")

    def add(self, code: ErrorCode, message: str, **kwargs) -> GenerationError:
        """Build, record and return an error in one step."""
        error = GenerationError(code=code, message=message, **kwargs)
        self.add_error(error)
        return error

    def extend(self, errors: List[GenerationError]) -> None:
        for error in errors:
            self.add_error(error)

    def has_errors(self) -> bool:
        """Check if any errors have been recorded."""
        return len(self.errors) > 0

    def get_error_summary(self) -> Dict[str, Any]:
        """Get a summary of all recorded errors grouped by code."""
        by_code: Dict[str, int] = {}
        for error in self.errors:
            by_code[error.code.value] = by_code.get(error.code.value, 0) + 1
        return {
            'error_count': len(self.errors),
            'by_code': by_code,
            'errors': [self._format_error_for_summary(e) for e in self.errors],
        }

    def _format_error_for_summary(self, error: GenerationError) -> Dict[str, Any]:
        return {
            'code': error.code.value,
            'severity': error.severity.value,
            'message': error.message,
            'vocabulary_word': error.vocabulary_word,
            'item_type': error.item_type,
        }
