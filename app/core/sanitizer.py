"""
Input validation and sanitization for user-authored content.

Every validator returns the cleaned value or raises ValidationError, so callers
can sanitize and reject in a single step before anything reaches the store.
"""

import re
from typing import List, Optional

from app.core.exceptions import ValidationError

MAX_NAME_LENGTH = 50
MAX_QUESTION_TEXT_LENGTH = 500
MAX_ANSWER_LENGTH = 100
MAX_HINTS = 5
MAX_HINT_LENGTH = 200
MAX_HINT_PASSWORD_LENGTH = 50

_TAG_RE = re.compile(r"<[^>]*>")
_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]")
_NAME_RE = re.compile(r"^[a-zA-Z0-9\s\-_.]+$")
_UUID_RE = re.compile(r"^[a-zA-Z0-9\-]{8,50}$")
_PASSWORD_RE = re.compile(r"^[a-zA-Z0-9\-_@#$%^&*()+={}\[\]|\\:\";'?,./~`!]+$")


def sanitize_html(value: str) -> str:
    """Strip tags, attributes and stray angle brackets from free text."""
    cleaned = _TAG_RE.sub("", value)
    cleaned = cleaned.replace("<", "").replace(">", "")
    return _CONTROL_RE.sub("", cleaned)


def _require_text(value: Optional[str], label: str, max_length: int) -> str:
    if value is None or not isinstance(value, str):
        raise ValidationError(f"{label} is required")

    trimmed = value.strip()
    if not trimmed:
        raise ValidationError(f"{label} cannot be empty")
    if len(trimmed) > max_length:
        raise ValidationError(f"{label} must be {max_length} characters or less")

    return trimmed


def validate_user_name(name: Optional[str]) -> str:
    trimmed = _require_text(name, "Name", MAX_NAME_LENGTH)
    if not _NAME_RE.match(trimmed):
        raise ValidationError("Name contains invalid characters")
    return sanitize_html(trimmed)


def validate_question_text(text: Optional[str], label: str = "Question text") -> str:
    return sanitize_html(_require_text(text, label, MAX_QUESTION_TEXT_LENGTH))


def validate_answer(answer: Optional[str]) -> str:
    return sanitize_html(_require_text(answer, "Answer", MAX_ANSWER_LENGTH))


def validate_hints(hints: Optional[List[str]]) -> List[str]:
    """Validate a hint list. Blank hints are dropped rather than rejected."""
    if hints is None:
        return []
    if not isinstance(hints, list):
        raise ValidationError("Hints must be a list")
    if len(hints) > MAX_HINTS:
        raise ValidationError(f"Maximum {MAX_HINTS} hints allowed")

    sanitized = []
    for hint in hints:
        if not isinstance(hint, str):
            raise ValidationError("All hints must be strings")
        trimmed = hint.strip()
        if not trimmed:
            continue
        if len(trimmed) > MAX_HINT_LENGTH:
            raise ValidationError(f"Each hint must be {MAX_HINT_LENGTH} characters or less")
        sanitized.append(sanitize_html(trimmed))

    return sanitized


def validate_hint_password(password: Optional[str]) -> Optional[str]:
    """Empty or missing passwords mean the hints are public."""
    if password is None:
        return None
    if not isinstance(password, str):
        raise ValidationError("Password must be a string")

    trimmed = password.strip()
    if not trimmed:
        return None
    if len(trimmed) > MAX_HINT_PASSWORD_LENGTH:
        raise ValidationError(f"Password must be {MAX_HINT_PASSWORD_LENGTH} characters or less")
    if not _PASSWORD_RE.match(trimmed):
        raise ValidationError("Password contains invalid characters")

    return sanitize_html(trimmed)


def is_valid_uuid(value: Optional[str]) -> bool:
    """Loose identity format check; accepts prefixed forms like ``user-xxxx``."""
    return isinstance(value, str) and bool(_UUID_RE.match(value))


def validate_uuid(value: Optional[str], label: str = "UUID") -> str:
    if not is_valid_uuid(value):
        raise ValidationError(f"Valid {label} is required")
    return value
