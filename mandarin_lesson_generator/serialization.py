"""
JSON-compatible conversion of result objects.
"""

import json
from dataclasses import fields, is_dataclass
from datetime import datetime
from enum import Enum
from typing import Any


def to_dict(value: Any) -> Any:
    """
    Convert dataclasses (recursively) into plain JSON-compatible structures.

    Enums become their values and datetimes become ISO-8601 strings.
    """
    if is_dataclass(value) and not isinstance(value, type):
        return {f.name: to_dict(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, dict):
        return {str(to_dict(key)): to_dict(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_dict(item) for item in value]
    return value


def to_json(value: Any, indent: int = 2) -> str:
    return json.dumps(to_dict(value), ensure_ascii=False, indent=indent)
