"""
Field rendering dispatcher.

Maps each field definition to a widget kind and builds the view model that a
front end draws. Front ends only consume Widget objects; they never look at
field types directly.
"""
import enum
import logging
from dataclasses import dataclass, field as dc_field
from functools import partial
from typing import Callable, Iterable, List, Mapping, Optional, Tuple

from dynaform.client.schemas import Answer, FieldDefinition, answer_text
from dynaform.client.validation import is_email_field
from dynaform.db.enums import FieldType

logger = logging.getLogger(__name__)

ChangeCallback = Callable[[Answer], None]


class RendererKind(str, enum.Enum):
    text_input = "text_input"
    email_input = "email_input"
    dropdown = "dropdown"
    radio_group = "radio_group"


def select_renderer(field: FieldDefinition) -> Optional[RendererKind]:
    """Widget kind for a field, or None when the field type is not supported."""
    if field.field_type == FieldType.text:
        if is_email_field(field.name):
            return RendererKind.email_input
        return RendererKind.text_input
    if field.field_type == FieldType.list:
        return RendererKind.dropdown
    if field.field_type == FieldType.radio:
        return RendererKind.radio_group

    logger.warning("Unknown field type %r for field %r, skipping", field.field_type, field.name)
    return None


@dataclass(frozen=True)
class Widget:
    kind: RendererKind
    field: FieldDefinition
    value: str
    error: Optional[str]
    on_change: Optional[ChangeCallback] = dc_field(default=None, compare=False, repr=False)

    @property
    def label(self) -> str:
        return self.field.name

    @property
    def required(self) -> bool:
        return self.field.required

    @property
    def display_label(self) -> str:
        return f"{self.label} *" if self.required else self.label

    @property
    def input_type(self) -> Optional[str]:
        if self.kind == RendererKind.email_input:
            return "email"
        if self.kind == RendererKind.text_input:
            return "text"
        return None

    @property
    def options(self) -> Tuple[str, ...]:
        return tuple(self.field.options)

    @property
    def helper_text(self) -> str:
        if self.error:
            return self.error
        if self.kind in (RendererKind.text_input, RendererKind.email_input):
            if self.field.min_length or self.field.max_length:
                return f"Min: {self.field.min_length or 0} Max: {self.field.max_length or 0}"
        return ""

    def change(self, value: Answer) -> None:
        if self.on_change is not None:
            self.on_change(value)


def build_widget(
    field: FieldDefinition,
    value: Optional[Answer] = None,
    error: Optional[str] = None,
    on_change: Optional[ChangeCallback] = None,
) -> Optional[Widget]:
    kind = select_renderer(field)
    if kind is None:
        return None
    return Widget(kind=kind, field=field, value=answer_text(value), error=error or None, on_change=on_change)


def build_widgets(
    fields: Iterable[FieldDefinition],
    answers: Mapping[str, Answer],
    errors: Mapping[str, str],
    on_change: Optional[Callable[[str, Answer], None]] = None,
) -> List[Widget]:
    """Widgets for the whole form in definition order; unsupported fields are left out."""
    widgets = []
    for field in fields:
        callback = partial(on_change, field.name) if on_change is not None else None
        widget = build_widget(field, answers.get(field.name, ""), errors.get(field.name), callback)
        if widget is not None:
            widgets.append(widget)
    return widgets
