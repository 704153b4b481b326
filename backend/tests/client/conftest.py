import pytest

from dynaform.client.schemas import parse_fields

SAMPLE_CONFIG = [
    {"id": 1, "name": "Full Name", "fieldType": "TEXT", "minLength": 1, "maxLength": 100,
     "defaultValue": "John Doe", "required": True},
    {"id": 2, "name": "Email", "fieldType": "TEXT", "minLength": 1, "maxLength": 50,
     "defaultValue": "hello@mail.com", "required": True},
    {"id": 3, "name": "Gender", "fieldType": "LIST", "defaultValue": "1", "required": True,
     "options": ["Male", "Female", "Others"]},
    {"id": 4, "name": "Love React?", "fieldType": "RADIO", "defaultValue": "1", "required": True,
     "options": ["Yes", "No"]},
]


@pytest.fixture
def sample_config():
    return [dict(item) for item in SAMPLE_CONFIG]


@pytest.fixture
def sample_fields(sample_config):
    return parse_fields(sample_config)
