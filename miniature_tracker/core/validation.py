"""
Field rules applied before any repository write.

Name-like fields (project name/army, miniature name) must be non-empty after
trimming and contain at least one alphanumeric or ASCII punctuation character,
so whitespace-only and control-character-only strings are rejected.
Recipe names only need to be non-empty after trimming.
"""
from __future__ import annotations

import string
from typing import Optional

from .errors import ValidationError

_ASCII_PUNCTUATION = frozenset(string.punctuation)


def is_meaningful_name(value: str) -> bool:
    trimmed = value.strip()
    if not trimmed:
        return False
    return any(c.isalnum() or c in _ASCII_PUNCTUATION for c in trimmed)


def is_non_blank(value: str) -> bool:
    return bool(value.strip())


def require_name(value: Optional[str], message: str) -> None:
    if value is None or not is_meaningful_name(value):
        raise ValidationError(message)


def require_non_blank(value: Optional[str], message: str) -> None:
    if value is None or not is_non_blank(value):
        raise ValidationError(message)
