"""
Client-side models for field definitions and answers.

Field definitions are parsed leniently: a field type the client does not know
is kept as a plain string so the renderer can skip it instead of the whole
config failing to load.
"""
from typing import Dict, List, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from dynaform.db.enums import FieldType

Answer = Union[str, bool]
AnswerSet = Dict[str, Answer]


class FieldDefinition(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
        extra="ignore",
    )

    id: Optional[int] = None
    name: str
    field_type: Union[FieldType, str] = Field(union_mode="left_to_right")
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    default_value: Optional[str] = None
    required: bool = False
    options: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("options", "listOfValues1", "listOfValues"),
    )

    @property
    def is_supported(self) -> bool:
        return isinstance(self.field_type, FieldType)


def parse_fields(data: List[dict]) -> List[FieldDefinition]:
    """Parse the `data` list of a config response."""
    return [FieldDefinition.model_validate(item) for item in data]


def is_blank(value: Optional[Answer]) -> bool:
    """True for None and for strings that are empty after stripping."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def answer_text(value: Optional[Answer]) -> str:
    """String form of an answer as shown in a widget; booleans read as Yes/No."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "Yes" if value else "No"
    return str(value)
