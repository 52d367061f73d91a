"""
Notekeeper API - Note Input Validation
=======================================

What:  Pure functions that clean raw title/content values and collect errors.
How:   A value is trimmed; if nothing is left (or it was not a string at
       all) the field is invalid.

Rules:
    Create: title and content are both mandatory. Every failing field is
            reported.
    Update: only fields present in the request are checked. A present but
            blank (or null) field is an error, never treated as "omitted".
            Checking stops at the first failing field.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from notekeeper.exceptions import ValidationError

NOTE_FIELDS = ("title", "content")

_REQUIRED_MESSAGE = "{label} is required and cannot be empty or just spaces"
_BLANK_MESSAGE = "{label} cannot be empty or just spaces"


def clean_string(value: Any) -> str:
    if not isinstance(value, str):
        return ""
    return value.strip()


@dataclass
class ValidationResult:
    title: str = ""
    content: str = ""
    errors: List[str] = field(default_factory=list)
    invalid_fields: List[str] = field(default_factory=list)

    @property
    def is_valid(self) -> bool:
        return not self.errors

    def raise_for_errors(self) -> None:
        if self.errors:
            raise ValidationError(details=self.errors, fields=self.invalid_fields)


def validate_note_input(title: Any, content: Any) -> ValidationResult:
    """Validate a create payload. Both fields are required."""
    result = ValidationResult(title=clean_string(title), content=clean_string(content))
    for name in NOTE_FIELDS:
        if not getattr(result, name):
            result.errors.append(_REQUIRED_MESSAGE.format(label=name.capitalize()))
            result.invalid_fields.append(name)
    return result


def validate_note_changes(provided: Dict[str, Any]) -> Dict[str, str]:
    """
    Validate the fields present in an update payload.

    Args:
        provided: Mapping of field name to raw value, containing only the
                  fields the client actually sent.

    Returns:
        Cleaned values for the provided fields.

    Raises:
        ValidationError: On the first provided field that is blank.
    """
    cleaned: Dict[str, str] = {}
    for name in NOTE_FIELDS:
        if name not in provided:
            continue
        value = clean_string(provided[name])
        if not value:
            raise ValidationError(
                details=[_BLANK_MESSAGE.format(label=name.capitalize())],
                fields=[name],
            )
        cleaned[name] = value
    return cleaned


def normalize_query(raw: Optional[str]) -> Optional[str]:
    """Trim and lower-case a search query; None when nothing usable remains."""
    cleaned = clean_string(raw).lower()
    return cleaned or None
