"""
Data models for request and content validation.
"""

from dataclasses import dataclass, field
from typing import List


@dataclass
class ValidationResult:
    """Outcome of a validation pass: every violation found, not just the first."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
