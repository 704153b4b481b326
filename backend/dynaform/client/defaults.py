"""Initial answers from field definitions."""
from typing import Iterable

from dynaform.client.schemas import AnswerSet, FieldDefinition
from dynaform.db.enums import OPTION_FIELD_TYPES


def resolve_default_value(field: FieldDefinition) -> str:
    """
    Default answer for a field.

    Text fields use the default verbatim. For option fields the default is a
    zero-based index into the options; an index that does not parse or falls
    outside the list leaves the field empty.
    """
    if field.default_value is None:
        return ""

    if field.field_type in OPTION_FIELD_TYPES:
        try:
            index = int(field.default_value)
        except (TypeError, ValueError):
            return ""
        if 0 <= index < len(field.options):
            return field.options[index]
        return ""

    return field.default_value


def initial_answers(fields: Iterable[FieldDefinition]) -> AnswerSet:
    return {field.name: resolve_default_value(field) for field in fields}
