"""
Lesson loading from JSON documents.

Lesson files written by the authoring tools use camelCase keys
(partOfSpeech); hand-written files often use snake_case. Both are accepted.
"""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from ..errors import InvalidLessonError
from ..models import DifficultyLevel, Lesson, LessonMetadata, VocabularyEntry


logger = logging.getLogger(__name__)


def _get(data: Dict[str, Any], snake: str, camel: Optional[str] = None, default=None):
    if snake in data:
        return data[snake]
    if camel and camel in data:
        return data[camel]
    return default


def _vocabulary_from_list(items: Optional[List[Any]]) -> List[VocabularyEntry]:
    entries = []
    for index, item in enumerate(items or []):
        if not isinstance(item, dict) or not item.get("word"):
            raise InvalidLessonError(f"Vocabulary entry {index} must be an object with a word",
                                     entry_index=index)
        entries.append(VocabularyEntry(
            word=str(item["word"]),
            translation=str(item.get("translation", "")),
            part_of_speech=_get(item, "part_of_speech", "partOfSpeech"),
        ))
    return entries


def _difficulty(value: Any) -> DifficultyLevel:
    if value is None:
        return DifficultyLevel.INTERMEDIATE
    try:
        return DifficultyLevel(value)
    except ValueError:
        logger.warning(f"Unknown lesson difficulty '{value}', using intermediate")
        return DifficultyLevel.INTERMEDIATE


def lesson_from_dict(data: Dict[str, Any]) -> Lesson:
    """
    Build a Lesson from a decoded JSON object.

    Args:
        data: Lesson object

    Returns:
        Lesson

    Raises:
        InvalidLessonError: If the object is not a lesson or has no content
    """
    if not isinstance(data, dict):
        raise InvalidLessonError("Lesson must be a JSON object")

    content = data.get("content")
    if content is None:
        raise InvalidLessonError("Lesson content is required", lesson_id=data.get("id"))
    if not isinstance(content, str):
        raise InvalidLessonError("Lesson content must be a string", lesson_id=data.get("id"))

    raw_metadata = data.get("metadata") or {}
    # Some exports put vocabulary at the top level instead of under metadata
    vocabulary = _get(raw_metadata, "vocabulary", default=None)
    if vocabulary is None:
        vocabulary = data.get("vocabulary")

    metadata = LessonMetadata(
        difficulty=_difficulty(raw_metadata.get("difficulty")),
        tags=[str(tag) for tag in raw_metadata.get("tags", [])],
        source=raw_metadata.get("source"),
        vocabulary=_vocabulary_from_list(vocabulary),
    )

    lesson_id = str(data.get("id") or "lesson")
    return Lesson(
        id=lesson_id,
        title=str(data.get("title") or lesson_id),
        content=content,
        description=str(data.get("description") or ""),
        metadata=metadata,
    )


def load_lesson(path: Union[str, Path]) -> Lesson:
    """
    Load a lesson from a JSON file.

    Raises:
        InvalidLessonError: If the file is missing, not valid JSON, or not a lesson
    """
    path = Path(path)
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = json.load(f)
    except FileNotFoundError:
        raise InvalidLessonError(f"Lesson file not found: {path}", path=str(path))
    except json.JSONDecodeError as e:
        raise InvalidLessonError(f"Lesson file is not valid JSON: {e}", path=str(path))

    lesson = lesson_from_dict(data)
    logger.info(f"Loaded lesson '{lesson.id}' with {len(lesson.metadata.vocabulary)} vocabulary entries")
    return lesson
