"""
Field validation.

Pure functions: no I/O, no state. Rules run in a fixed order and the first
failing rule decides the message.
"""
import re
from typing import Dict, Iterable, Mapping, Optional

from dynaform.client.schemas import Answer, FieldDefinition, answer_text
from dynaform.db.enums import FieldType

EMAIL_RE = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

INVALID_EMAIL = "Please enter a valid email address"


def is_valid_email(value: str) -> bool:
    return EMAIL_RE.fullmatch(value) is not None


def is_email_field(field_name: str) -> bool:
    return "email" in field_name.lower()


def validate_field(field: FieldDefinition, value: Optional[Answer]) -> str:
    """
    Validate one answer against its field definition.

    Returns the error message, or an empty string when the value is valid.
    """
    text = answer_text(value)

    if field.required and text.strip() == "":
        return f"{field.name} is required"

    if text and is_email_field(field.name) and not is_valid_email(text):
        return INVALID_EMAIL

    if field.field_type == FieldType.text and text:
        if field.min_length and len(text) < field.min_length:
            return f"{field.name} must be at least {field.min_length} characters"
        if field.max_length and len(text) > field.max_length:
            return f"{field.name} must be no more than {field.max_length} characters"

    return ""


def validate_all_fields(
    answers: Mapping[str, Answer],
    fields: Iterable[FieldDefinition],
) -> Dict[str, str]:
    """Errors keyed by field name; an empty dict means the form can be submitted."""
    errors: Dict[str, str] = {}
    for field in fields:
        error = validate_field(field, answers.get(field.name, ""))
        if error:
            errors[field.name] = error
    return errors
