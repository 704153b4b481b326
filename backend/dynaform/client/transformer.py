"""Translate answers keyed by display name into the user payload."""
import re
from typing import Any, Dict, Mapping, Optional

from dynaform.client.schemas import Answer, is_blank

KNOWN_FIELD_NAMES = {
    "full name": "fullName",
    "email": "email",
    "gender": "gender",
    "love react?": "loveReactFlag",
}

# Fields whose Yes/No answer is sent as a boolean
YES_NO_FIELDS = {"loveReactFlag"}

_WORD_START_RE = re.compile(r"^\w|[A-Z]|\b\w")
_WHITESPACE_RE = re.compile(r"\s+")


def to_camel_case(label: str) -> str:
    """'Favourite colour' -> 'favouriteColour'."""

    def _case(match: "re.Match[str]") -> str:
        return match.group(0).lower() if match.start() == 0 else match.group(0).upper()

    return _WHITESPACE_RE.sub("", _WORD_START_RE.sub(_case, label.strip()))


def payload_key(field_name: str) -> str:
    return KNOWN_FIELD_NAMES.get(field_name.strip().lower()) or to_camel_case(field_name)


def _yes_no(value: Answer) -> bool:
    return value is True or value == "Yes"


def transform_answers(answers: Mapping[str, Optional[Answer]]) -> Dict[str, Any]:
    """
    Build the submission payload.

    Blank answers are dropped before renaming, so a field the user left empty
    never reaches the backend.
    """
    payload: Dict[str, Any] = {}
    for name, value in answers.items():
        if is_blank(value):
            continue
        key = payload_key(name)
        payload[key] = _yes_no(value) if key in YES_NO_FIELDS else value
    return payload
